import logging
import re
from itertools import combinations

import numpy as np
import pandas as pd

from ruleminer.Associations import Associations, Rule
from ruleminer.Errors import EmptyTransactionSetError, LatticeConsistencyError
from ruleminer.HashTree import HashTree
from ruleminer.Hasher import ModHasher
from ruleminer.Itemset import Itemset

logger = logging.getLogger(__name__)

# cell values that carry no item in attribute-value data
MISSING_VALUES = ('', '?')


class RuleMiner:
    """Apriori miner of frequent itemsets and association rules.

    Candidates of each level are indexed in a HashTree so that the counting pass only has to
    route every size-k subset of a transaction down the tree instead of scanning all candidates.
    Copyright (C) 2026 the ruleminer authors

    This program is free software: you can redistribute it and/or modify it under the terms of the
    GNU General Public License as published by the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    This program is distributed in the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the
    implied warranty of MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License
    for more details.

    You should have received a copy of the GNU General Public License along with this program.
    If not, see <http://www.gnu.org/licenses/>.
    """

    """
    :param
    @minsup - minimum support, as a fraction of the transactions, in (0, 1]
    @minconf - minimum confidence of a rule, in (0, 1]
    @input_data - either a data frame (decoded by load_data) or a sequence of transactions,
        each an iterable of integer item ids
    @n_items - size of the item universe for integer transactions, by default the largest id + 1
    @market_basket - True: every cell of the data frame is an item; False: every column is an
        attribute and every attribute value an item
    @item_names - labels of the item ids, used when printing
    @max_leaf - the maximum number of candidates in a HashTree leaf before it splits
    @hasher - bucket function of the HashTree, ModHasher(n_items) by default
    """
    def __init__(self,
                 minsup,
                 minconf,
                 input_data,
                 n_items=None,
                 market_basket=False,
                 item_names=None,
                 max_leaf=3,
                 hasher=None
                 ):
        if not 0 < minsup <= 1:
            raise ValueError("minsup must be in (0, 1], got %r" % minsup)
        if not 0 < minconf <= 1:
            raise ValueError("minconf must be in (0, 1], got %r" % minconf)
        if int(max_leaf) != max_leaf or max_leaf < 1:
            raise ValueError("max_leaf must be a positive integer, got %r" % max_leaf)

        self.minsup = minsup
        self.minconf = minconf
        self.input_data = input_data
        self.n_items = n_items
        self.market_basket = market_basket
        self.item_names = item_names
        self.max_leaf = int(max_leaf)
        self.hasher = hasher

    def fit(self):

        if isinstance(self.input_data, pd.DataFrame):
            transactions, item_names = load_data(self, self.input_data)
            n_items = len(item_names)
            if self.item_names is not None:
                item_names = self.item_names
        else:
            transactions = [sorted(set(transaction)) for transaction in self.input_data]
            n_items = self.n_items
            if n_items is None:
                n_items = max((transaction[-1] + 1 for transaction in transactions if transaction), default=0)
            item_names = self.item_names

        check_transactions(transactions, n_items)
        if item_names is not None:
            check_item_names(item_names, n_items, exact=isinstance(self.input_data, pd.DataFrame))

        logger.info("mining %d transactions over %d items (minsup=%s, minconf=%s)",
                    len(transactions), n_items, self.minsup, self.minconf)

        frequent_itemsets = get_frequent_itemsets(transactions, n_items, self.minsup,
                                                  max_leaf=self.max_leaf, hasher=self.hasher)
        rules = rule_gen(frequent_itemsets, self.minconf)

        return Associations(frequent_itemsets, rules, len(transactions), self.minsup, self.minconf,
                            item_names=item_names)


# ############################# functions for loading data #############################
def load_data(rule_miner_obj, input_data):
    """Decode a data frame into integer transactions, returns [transactions, item_names]"""
    transactions = [set() for _ in range(len(input_data))]
    item_names = list()

    if not rule_miner_obj.market_basket:

        # get column name
        column_names = input_data.columns.values
        unnamed = all(np.issubdtype(type(name), np.integer) for name in column_names)

        # each value of each column becomes one item
        for column in range(len(column_names)):
            values = input_data[column_names[column]]

            if unnamed:
                # data do not have column names
                field_name = 'field' + str(column + 1)
            else:
                field_name = str(column_names[column])

            item_of_value = dict()
            for value in sorted(set(value for value in values if not is_missing(value)), key=str):
                item_of_value[value] = len(item_names)
                item_names.append(field_name + "=" + str(value))

            for row, value in enumerate(values):
                if not is_missing(value):
                    transactions[row].add(item_of_value[value])

    else:
        # each non-empty cell holds an item name
        all_items = np.unique([str(value) for value in input_data.values.ravel() if not is_missing(value)])
        item_names = [str(item) for item in all_items]
        item_of_name = dict((name, item) for item, name in enumerate(item_names))

        for row, values in enumerate(input_data.values):
            for value in values:
                if not is_missing(value):
                    transactions[row].add(item_of_name[str(value)])

    logger.info("loaded %d transactions with %d distinct items", len(transactions), len(item_names))
    return [[sorted(transaction) for transaction in transactions], item_names]


def is_missing(value):
    if isinstance(value, str):
        return value.strip() in MISSING_VALUES
    return pd.isna(value)


def read_transactions(path, market_basket=False, sep=',', header=False):
    """Read a data file into a data frame that load_data understands.

    Market-basket files may have rows of different lengths, one transaction per line.
    """
    if market_basket:
        with open(path, 'r') as data_file:
            rows = [[cell.strip() for cell in re.split(sep, line.strip())] for line in data_file if line.strip()]
        return pd.DataFrame(rows).fillna('')

    return pd.read_csv(path, sep=sep, header=0 if header else None, na_values=['?'], dtype=str,
                       skipinitialspace=True, engine='python')


def read_item_names(path):
    with open(path, 'r') as names_file:
        return [line.rstrip('\n') for line in names_file]


def check_item_names(item_names, n_items, exact=False):
    # labels of a data frame run must line up one to one with the items load_data found
    if len(item_names) < n_items or (exact and len(item_names) != n_items):
        raise ValueError("%d item names given for %d items" % (len(item_names), n_items))


def check_transactions(transactions, n_items):
    if len(transactions) == 0:
        raise EmptyTransactionSetError("cannot mine an empty transaction set")

    for index, transaction in enumerate(transactions):
        for item in transaction:
            if not 0 <= item < n_items:
                raise ValueError("transaction %d holds item %r outside [0, %d)" % (index, item, n_items))


# ############################# functions for frequent itemsets #############################
def is_frequent(count, n_transactions, minsup):
    return count / n_transactions >= minsup


def get_subsets(transaction, k):
    # combinations of a sorted transaction come out sorted, repeated items count once
    return combinations(sorted(set(transaction)), k)


def apriori_gen(previous):
    """Join the itemsets of one level that agree on all but the last item, keeping only candidates
    whose every subset one item shorter is in the level as well.
    """
    previous = [tuple(itemset) for itemset in previous]
    known = set(previous)
    candidates = list()

    for i in range(len(previous)):
        for j in range(i + 1, len(previous)):
            first = previous[i]
            second = previous[j]

            if first[:-1] != second[:-1]:
                continue

            candidate = tuple(sorted(first + second[-1:]))

            # dropping either of the last two items gives back first and second
            if all(candidate[:drop] + candidate[drop + 1:] in known for drop in range(len(candidate) - 2)):
                candidates.append(candidate)

    return candidates


def count_support(candidates, transactions, k, max_leaf, hasher):
    """Count in how many transactions each size-k candidate occurs"""
    tree = HashTree(hasher, max_leaf, k)
    for candidate in candidates:
        tree.insert(candidate)

    counts = dict((candidate, 0) for candidate in candidates)

    for transaction in transactions:
        if len(transaction) < k:
            continue
        for subset in get_subsets(transaction, k):
            if tree.contains(subset):
                counts[subset] += 1

    return counts


def get_frequent_itemsets(transactions, n_items, minsup, max_leaf=3, hasher=None):
    """Build the lattice of frequent itemsets, level k holding those of size k + 1.

    Mining stops after a level with at most one itemset, as no candidate can be joined from it.
    Empty levels are not kept.
    """
    n_transactions = len(transactions)
    if n_transactions == 0:
        raise EmptyTransactionSetError("cannot mine an empty transaction set")

    if hasher is None:
        hasher = ModHasher(max(n_items, 1))

    # level 1 is counted directly
    all_items = np.fromiter((item for transaction in transactions for item in set(transaction)), dtype=np.int64)
    count = np.bincount(all_items, minlength=n_items)

    first_level = [Itemset([item], int(count[item])) for item in range(n_items)
                   if is_frequent(count[item], n_transactions, minsup)]
    frequent_itemsets = [first_level]
    logger.info("level 1: %d frequent itemsets", len(first_level))

    k = 1
    while len(frequent_itemsets[-1]) > 1:
        k += 1
        candidates = apriori_gen(frequent_itemsets[-1])
        logger.debug("level %d: %d candidates", k, len(candidates))

        counts = count_support(candidates, transactions, k, max_leaf, hasher)
        level = sorted(Itemset(candidate, candidate_count) for candidate, candidate_count in counts.items()
                       if is_frequent(candidate_count, n_transactions, minsup))

        if not level:
            logger.debug("level %d: no frequent itemsets, stopping", k)
            break

        logger.info("level %d: %d frequent itemsets", k, len(level))
        frequent_itemsets.append(level)

    return frequent_itemsets


# ############################# functions for rule generation #############################
def rule_gen(frequent_itemsets, minconf):
    """Derive the rules reaching minconf from every frequent itemset of two or more items"""
    support_index = dict((itemset.key(), itemset.count) for level in frequent_itemsets for itemset in level)
    rules = list()

    for level in frequent_itemsets[1:]:
        for fk in level:
            confident = list()
            for item in fk:
                consequent = Itemset([item], get_count(support_index, (item,)))
                rule = get_rule(support_index, fk, consequent, minconf)
                if rule is not None:
                    rules.append(rule)
                    confident.append(consequent)

            ap_gen_rules(support_index, fk, confident, minconf, rules)

    logger.info("%d rules reach confidence %s", len(rules), minconf)
    return rules


def ap_gen_rules(support_index, fk, consequents, minconf, rules):
    """Grow the confident consequents of fk by one item and keep those that stay confident.

    A consequent can only be confident if all of its sub-consequents one item shorter are, so
    the consequents are joined and pruned exactly like the candidates of a level.
    """
    if not consequents:
        return

    m = len(consequents[-1])
    if len(fk) > m + 1:
        grown = list()
        for items in apriori_gen(consequents):
            consequent = Itemset(items, get_count(support_index, items))
            rule = get_rule(support_index, fk, consequent, minconf)
            if rule is not None:
                rules.append(rule)
                grown.append(consequent)

        ap_gen_rules(support_index, fk, grown, minconf, rules)


def get_rule(support_index, fk, consequent, minconf):
    """Return the rule (fk - consequent) => consequent, or None if it is not confident"""
    antecedent_items = [item for item in fk if item not in consequent]
    antecedent = Itemset(antecedent_items, get_count(support_index, antecedent_items))

    confidence = fk.count / antecedent.count
    if confidence >= minconf:
        return Rule(antecedent, consequent, confidence, fk.count)
    return None


def get_count(support_index, items):
    # every subset of a frequent itemset has to be in the lattice with a positive count
    count = support_index.get(tuple(items))
    if count is None:
        raise LatticeConsistencyError("itemset %r is missing from the lattice" % (list(items),))
    if count <= 0:
        raise LatticeConsistencyError("itemset %r has support count %r" % (list(items), count))
    return count


# ############################# functions for printing #############################
def print_itemset(associations, itemset):
    if associations.item_names is None:
        return " ".join(str(item) for item in itemset)
    return " ".join(str(associations.item_names[item]) for item in itemset)


def print_itemsets(associations):
    lines = list()
    for itemset in associations.itemsets():
        lines.append("[ " + print_itemset(associations, itemset) + " ] " + str(itemset.count))
    return lines


def print_rules(associations):
    lines = list()
    for rule in associations.rules:
        lines.append(print_itemset(associations, rule.antecedent) + " (" + str(rule.antecedent.count) + ") => " +
                     print_itemset(associations, rule.consequent) + " (" + str(rule.consequent.count) + ")" +
                     " conf(" + str(rule.confidence) + ")")
    return lines
