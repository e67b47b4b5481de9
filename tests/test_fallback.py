from pathfind.utils.fallback import POPULAR_DESTINATIONS, FallbackSuggestions


def test_static_list_has_twenty_destinations():
    assert len(POPULAR_DESTINATIONS) == 20


def test_empty_query_returns_first_five():
    suggestions = FallbackSuggestions().suggest("  ")
    assert [s.description for s in suggestions] == POPULAR_DESTINATIONS[:5]


def test_substring_match_is_case_insensitive():
    descriptions = [s.description for s in FallbackSuggestions().suggest("TOKYO")]
    assert descriptions == ["Tokyo, Japan"]


def test_substring_matches_inside_words():
    descriptions = [s.description for s in FallbackSuggestions().suggest("ancis")]
    assert descriptions == ["San Francisco, CA, USA"]


def test_word_prefix_match_when_substring_fails():
    descriptions = [s.description for s in FallbackSuggestions().suggest("york new")]
    assert descriptions == ["New York, NY, USA"]


def test_results_are_capped():
    suggestions = FallbackSuggestions().suggest("a")
    assert len(suggestions) == 8


def test_explicit_limit():
    assert len(FallbackSuggestions().suggest("usa", limit=2)) == 2


def test_no_match_returns_empty():
    assert FallbackSuggestions().suggest("zzzz") == []


def test_predictions_are_split_for_two_line_rendering():
    (paris,) = FallbackSuggestions().suggest("paris")
    assert paris.main_text == "Paris"
    assert paris.secondary_text == "France"
    assert paris.type == "city"
    assert paris.place_id is None
