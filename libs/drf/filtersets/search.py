from rest_framework.filters import SearchFilter


class PhraseSearchFilter(SearchFilter):
    """Search filter that matches the whole query as one phrase.

    ``?search=Sales Team`` looks for "Sales Team" instead of "Sales" and "Team"
    separately, which keeps department and template name lookups precise.
    """

    def get_search_terms(self, request):
        query = request.query_params.get(self.search_param, "").strip()
        return [query] if query else []
