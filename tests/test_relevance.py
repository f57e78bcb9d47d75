from indie_coffee.relevance import looks_like_coffee_venue


def test_coffee_hints_match():
    assert looks_like_coffee_venue("Ritual Coffee Roasters")
    assert looks_like_coffee_venue("Little Espresso Bar")
    assert looks_like_coffee_venue("COLD-BREW Club")
    assert looks_like_coffee_venue("Cafe Luna")


def test_unrelated_names_do_not_match():
    assert not looks_like_coffee_venue("Ace Hardware")
    assert not looks_like_coffee_venue("")
    assert not looks_like_coffee_venue(None)


def test_custom_hints():
    assert looks_like_coffee_venue("Matcha House", hints=["matcha"])
    assert not looks_like_coffee_venue("Matcha House", hints=["coffee"])
