from itertools import combinations

import pytest
from ruleminer.Errors import LatticeConsistencyError
from ruleminer.Itemset import Itemset
from ruleminer.RuleMiner import RuleMiner, get_frequent_itemsets, print_itemsets, print_rules, rule_gen

BASKETS = [
    {0, 1, 2, 3},
    {0, 1, 2},
    {0, 1, 3},
    {0, 2, 3},
    {1, 2, 3},
    {0, 1},
    {2, 3},
    {0, 1, 2, 3, 4},
    {4},
    {0, 4},
    {0, 1, 2, 4},
    {1, 2, 3, 4},
]


def brute_count(transactions, itemset):
    return sum(1 for transaction in transactions if set(itemset) <= set(transaction))


def rule_key(rule):
    return tuple(rule.antecedent), tuple(rule.consequent)


@pytest.fixture(scope="module")
def basket_rules():
    lattice = get_frequent_itemsets(BASKETS, 5, 0.25)
    return lattice, rule_gen(lattice, 0.6)


def test_confidence_identity(basket_rules):
    _, rules = basket_rules
    assert rules
    for rule in rules:
        union = rule.itemset()
        assert rule.count == brute_count(BASKETS, union)
        assert rule.antecedent.count == brute_count(BASKETS, rule.antecedent)
        assert rule.consequent.count == brute_count(BASKETS, rule.consequent)
        assert rule.confidence == pytest.approx(brute_count(BASKETS, union) / brute_count(BASKETS, rule.antecedent))
        assert rule.confidence >= 0.6


def test_rules_split_a_frequent_itemset(basket_rules):
    lattice, rules = basket_rules
    frequent = set(tuple(itemset) for level in lattice for itemset in level)
    for rule in rules:
        assert len(rule.antecedent) > 0
        assert len(rule.consequent) > 0
        assert not set(rule.antecedent) & set(rule.consequent)
        assert rule.itemset() in frequent


def test_rules_match_exhaustive_search(basket_rules):
    lattice, rules = basket_rules
    expected = set()
    for level in lattice[1:]:
        for itemset in level:
            for size in range(1, len(itemset)):
                for consequent in combinations(itemset, size):
                    antecedent = tuple(item for item in itemset if item not in consequent)
                    if itemset.count / brute_count(BASKETS, antecedent) >= 0.6:
                        expected.add((antecedent, consequent))

    found = [rule_key(rule) for rule in rules]
    assert len(found) == len(set(found))
    assert set(found) == expected


def test_consequents_grow_up_to_all_but_one_item():
    associations = RuleMiner(minsup=0.5, minconf=0.5, input_data=[{0, 1, 2}] * 4).fit()
    assert len(associations.rules) == 12

    from_triple = [rule for rule in associations.rules if len(rule.itemset()) == 3]
    assert sorted(len(rule.consequent) for rule in from_triple) == [1, 1, 1, 2, 2, 2]
    assert all(rule.confidence == 1.0 for rule in associations.rules)


def test_small_fixture_rules():
    transactions = [{0, 1, 2}, {0, 1}, {0, 2}, {1, 2}, {0, 1, 2}]
    associations = RuleMiner(minsup=0.6, minconf=0.7, input_data=transactions).fit()
    assert len(associations.rules) == 6
    assert all(rule.confidence == pytest.approx(0.75) for rule in associations.rules)

    strict = RuleMiner(minsup=0.6, minconf=0.8, input_data=transactions).fit()
    assert strict.rules == []


def test_only_confident_rules_are_kept():
    transactions = [{0, 1, 2}] * 3 + [{0, 1}] * 3 + [{1, 2}] * 3
    lattice = get_frequent_itemsets(transactions, 3, 0.3)
    rules = rule_gen(lattice, 0.9)
    keys = set(rule_key(rule) for rule in rules)
    assert ((0,), (1,)) in keys
    assert ((0, 2), (1,)) in keys
    assert ((0,), (1, 2)) not in keys


def test_missing_antecedent_is_an_internal_error():
    lattice = [[Itemset([0], 3)], [Itemset([0, 1], 2)]]
    with pytest.raises(LatticeConsistencyError):
        rule_gen(lattice, 0.5)


def test_zero_antecedent_count_is_an_internal_error():
    lattice = [[Itemset([0], 0), Itemset([1], 3)], [Itemset([0, 1], 2)]]
    with pytest.raises(LatticeConsistencyError):
        rule_gen(lattice, 0.5)


def test_frames_and_printing():
    transactions = [{0, 1, 2}, {0, 1}, {0, 2}, {1, 2}, {0, 1, 2}]
    associations = RuleMiner(minsup=0.6, minconf=0.7, input_data=transactions,
                             item_names=['bread', 'milk', 'eggs']).fit()

    itemsets = associations.itemsets_frame()
    assert list(itemsets.columns) == ['itemset', 'size', 'count', 'support']
    assert len(itemsets) == 6
    assert itemsets.iloc[3]['itemset'] == 'bread & milk'
    assert itemsets.iloc[3]['support'] == pytest.approx(0.6)

    rules = associations.rules_frame()
    assert list(rules.columns) == ['antecedent', 'consequent', 'antecedent_count', 'consequent_count',
                                   'support', 'confidence']
    assert len(rules) == 6
    assert rules['support'].tolist() == pytest.approx([0.6] * 6)

    assert print_itemsets(associations)[0] == "[ bread ] 4"
    assert print_itemsets(associations)[3] == "[ bread milk ] 3"
    assert print_rules(associations)[0] == "milk (4) => bread (4) conf(0.75)"
