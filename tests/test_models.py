from wpsuggest.models import SiteSuggestion, SuggestionType, UserSuggestion, display_title


def test_triggers():
    assert SuggestionType.MENTIONS.trigger == "@"
    assert SuggestionType.XPOSTS.trigger == "+"


def test_user_suggestion_capabilities():
    user = UserSuggestion("ann", "Ann Lee", "https://example.com/ann.png")
    assert (user.key, user.label, user.avatar_url) == ("ann", "Ann Lee", "https://example.com/ann.png")
    assert display_title(user) == "@ann"
    assert user.insertion_text == "ann"
    assert UserSuggestion.from_dict(user.to_dict()) == user


def test_site_suggestion_capabilities():
    site = SiteSuggestion("news", "Company News", "https://news.wordpress.com", "https://example.com/n.png")
    assert (site.key, site.label, site.avatar_url) == ("news", "Company News", "https://example.com/n.png")
    assert display_title(site) == "+news"
    assert site.insertion_text == "Company News"
    assert site.subtitle == "Company News"


def test_from_api_tolerates_missing_optional_fields():
    assert SiteSuggestion.from_api({"subdomain": "eng", "title": None}) == SiteSuggestion("eng", "")
    assert UserSuggestion.from_api({"user_login": "bob", "image_URL": ""}) == UserSuggestion("bob")
