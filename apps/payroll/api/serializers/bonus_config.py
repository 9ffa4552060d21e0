from django.db import transaction
from django.utils.translation import gettext as _
from rest_framework import serializers

from apps.payroll.constants import BonusOverrideScope
from apps.payroll.models import BonusConfig, BonusConfigOverride
from apps.payroll.utils.bonus_calculation import validate_scale

SCALE_FIELDS = ["scale_type", "min_fraction", "max_fraction", "floor_fraction", "threshold", "tiers"]


class BonusTierSerializer(serializers.Serializer):
    min_score = serializers.DecimalField(max_digits=7, decimal_places=2)
    payout = serializers.DecimalField(max_digits=6, decimal_places=4, min_value=0)


def tiers_to_json(tiers):
    if tiers is None:
        return None
    return [{"min_score": str(item["min_score"]), "payout": str(item["payout"])} for item in tiers]


class BonusConfigOverrideSerializer(serializers.ModelSerializer):
    """Department or employee override nested in a bonus configuration."""

    id = serializers.IntegerField(required=False)
    tiers = BonusTierSerializer(many=True, required=False, allow_null=True)

    class Meta:
        model = BonusConfigOverride
        fields = [
            "id",
            "scope",
            "department",
            "employee",
            "scale_type",
            "min_fraction",
            "max_fraction",
            "floor_fraction",
            "threshold",
            "tiers",
            "target_multiple",
            "note",
        ]

    def validate(self, data):
        scope = data.get("scope")
        if scope == BonusOverrideScope.DEPARTMENT:
            if data.get("department") is None:
                raise serializers.ValidationError({"department": _("Department overrides need a department")})
            data["employee"] = None
        elif scope == BonusOverrideScope.EMPLOYEE:
            if data.get("employee") is None:
                raise serializers.ValidationError({"employee": _("Employee overrides need an employee")})
            data["department"] = None

        if not data.get("scale_type") and data.get("target_multiple") is None:
            raise serializers.ValidationError(_("Override the scale, the target multiple, or both"))
        return data


class BonusConfigSerializer(serializers.ModelSerializer):
    """Serializer for BonusConfig with nested, writable overrides.

    The default scale and every overriding scale are checked for
    consistency (floor <= min <= max, threshold within 0-100, tiers
    present for tiered scales).
    """

    tiers = BonusTierSerializer(many=True, required=False)
    overrides = BonusConfigOverrideSerializer(many=True, required=False)

    class Meta:
        model = BonusConfig
        fields = [
            "id",
            "year",
            "scale_type",
            "min_fraction",
            "max_fraction",
            "floor_fraction",
            "threshold",
            "tiers",
            "target_multiple",
            "note",
            "overrides",
            "updated_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "updated_by", "created_at", "updated_at"]

    def _scale_config(self, data) -> BonusConfig:
        """Unsaved config holding the resulting scale fields."""
        values = {}
        for field in SCALE_FIELDS:
            if field in data:
                values[field] = tiers_to_json(data[field]) if field == "tiers" else data[field]
            elif self.instance is not None:
                values[field] = getattr(self.instance, field)
        return BonusConfig(**values)

    def validate(self, data):
        config = self._scale_config(data)
        global_scale = config.default_scale()
        errors = validate_scale(global_scale)
        if errors:
            raise serializers.ValidationError(errors)

        seen = set()
        for index, item in enumerate(data.get("overrides") or []):
            key = (item["scope"], item.get("department"), item.get("employee"))
            if key in seen:
                raise serializers.ValidationError({"overrides": _("Duplicate override for the same scope target")})
            seen.add(key)

            if not item.get("scale_type"):
                continue
            override = BonusConfigOverride(
                **{field: item.get(field) for field in SCALE_FIELDS if field != "tiers"},
                tiers=tiers_to_json(item.get("tiers")),
            )
            scale_errors = validate_scale(override.get_scale(global_scale))
            if scale_errors:
                raise serializers.ValidationError({"overrides": {index: scale_errors}})
        return data

    @transaction.atomic
    def create(self, validated_data):
        overrides = validated_data.pop("overrides", [])
        if "tiers" in validated_data:
            validated_data["tiers"] = tiers_to_json(validated_data["tiers"])
        config = BonusConfig.objects.create(**validated_data)
        BonusConfigOverride.objects.bulk_create(
            [BonusConfigOverride(config=config, **self._override_values(item)) for item in overrides]
        )
        return config

    @transaction.atomic
    def update(self, instance, validated_data):
        overrides = validated_data.pop("overrides", None)
        if "tiers" in validated_data:
            validated_data["tiers"] = tiers_to_json(validated_data["tiers"])
        for field, value in validated_data.items():
            setattr(instance, field, value)
        instance.save()
        if overrides is not None:
            self._sync_overrides(instance, overrides)
        return instance

    @staticmethod
    def _override_values(item):
        values = {key: value for key, value in item.items() if key != "id"}
        if "tiers" in values:
            values["tiers"] = tiers_to_json(values["tiers"])
        return values

    def _sync_overrides(self, config, overrides):
        """Delete the overrides left out, then update the rest by id and create new ones."""
        existing = {item.pk: item for item in config.overrides.all()}
        kept = {item["id"] for item in overrides if item.get("id") is not None}
        unknown = kept - set(existing)
        if unknown:
            raise serializers.ValidationError(
                {"overrides": _("Override %(id)s does not belong to this configuration") % {"id": min(unknown)}}
            )
        config.overrides.exclude(pk__in=kept).delete()

        for item in overrides:
            values = self._override_values(item)
            override = existing.get(item.get("id"))
            if override is None:
                BonusConfigOverride.objects.create(config=config, **values)
                continue
            for field, value in values.items():
                setattr(override, field, value)
            override.save()
