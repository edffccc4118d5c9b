from voicecart.catalog.ranker import SCORE_FIELD, rank_products, score_tokens, tokenize


def test_tokenize_strips_punctuation_and_lowercases():
    assert tokenize("  Men's Trail-Runner 2.0! ") == ["men", "s", "trail", "runner", "2", "0"]


def test_tokenize_empty_text_yields_single_empty_token():
    assert tokenize("") == [""]
    assert tokenize("   ?! ") == [""]


def test_score_tokens_symmetric_difference_over_result_length():
    # {"red", "shoe"} ^ {"red", "boot"} = {"shoe", "boot"} -> 2 / 2
    assert score_tokens(["red", "shoe"], ["red", "boot"]) == 1.0
    assert score_tokens(["red", "shoe"], ["shoe", "red"]) == 0.0


def test_rank_products_empty_results():
    assert rank_products("red shoes", []) == []


def test_rank_products_exact_match_scores_zero_and_wins():
    results = [
        {"name": "Blue Running Shoes"},
        {"name": "Red Running Shoes"},
        {"name": "Red Running Shoes Deluxe Edition"},
    ]
    ranked = rank_products("red running shoes", results)

    assert ranked == [{"name": "Red Running Shoes", SCORE_FIELD: 0.0}]


def test_rank_products_returns_all_ties_in_input_order():
    results = [
        {"name": "Trail Jacket", "id": "a"},
        {"name": "Rain Jacket", "id": "b"},
        {"name": "Rain Coat", "id": "c"},
    ]
    ranked = rank_products("winter jacket", results)

    assert [doc["id"] for doc in ranked] == ["a", "b"]
    assert all(doc[SCORE_FIELD] == ranked[0][SCORE_FIELD] for doc in ranked)


def test_rank_products_every_returned_score_is_the_minimum():
    results = [{"name": n} for n in ["a b c", "a b", "x y z", "a", "b a"]]
    ranked = rank_products("a b", results)

    minimum = min(doc[SCORE_FIELD] for doc in results)
    assert ranked
    assert all(doc[SCORE_FIELD] == minimum for doc in ranked)


def test_rank_products_writes_score_on_every_input_document():
    results = [{"name": "Red Shoe"}, {"name": "Green Hat"}]
    rank_products("red shoe", results)

    assert all(SCORE_FIELD in doc for doc in results)


def test_rank_products_empty_or_missing_name_does_not_raise():
    results = [{"name": ""}, {"name": None}, {}]
    ranked = rank_products("red shoes", results)

    # [""] vs ["red", "shoes"] -> 3 differing tokens / 1 token
    assert len(ranked) == 3
    assert all(doc[SCORE_FIELD] == 3.0 for doc in ranked)
