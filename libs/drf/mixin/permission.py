from typing import Any


class PermissionRegistrationMixin:
    """
    Mixin for ViewSets that declares the capability codes they require.

    ``RoleBasedPermission`` checks ``f"{permission_prefix}.{action}"`` against
    the role policy table, so every viewset built on this mixin exposes one
    capability per routed action.

    Class Attributes:
        module (str): Module the viewset belongs to (e.g., "Performance")
        submodule (str): Sub-module within the module (e.g., "Evaluations")
        permission_prefix (str): Prefix for capability codes (e.g., "evaluation")
    """

    module: Any = ""
    submodule: Any = ""
    permission_prefix = ""

    STANDARD_ACTIONS = ("list", "retrieve", "create", "update", "partial_update", "destroy")

    @classmethod
    def get_custom_actions(cls):
        """
        Get all custom actions defined in the viewset.

        Returns:
            list: Names of methods decorated with @action
        """
        custom_actions = []
        for attr_name in dir(cls):
            if attr_name.startswith("_"):
                continue
            attr = getattr(cls, attr_name)
            if callable(attr) and hasattr(attr, "mapping") and attr_name not in cls.STANDARD_ACTIONS:
                custom_actions.append(attr_name)
        return custom_actions

    @classmethod
    def get_registered_capabilities(cls):
        """
        Get every capability code this viewset can ask for.

        Returns:
            list: Capability codes such as ``evaluation.list`` or ``evaluation.transition``
        """
        if not cls.permission_prefix:
            return []

        actions = [name for name in cls.STANDARD_ACTIONS if hasattr(cls, name)]
        actions += cls.get_custom_actions()
        return [f"{cls.permission_prefix}.{name}" for name in actions]
