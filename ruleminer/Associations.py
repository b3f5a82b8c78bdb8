import pandas as pd


class Rule:
    """antecedent => consequent, with confidence = count(antecedent + consequent) / count(antecedent)"""

    def __init__(self, antecedent, consequent, confidence, count=0):
        self.antecedent = antecedent
        self.consequent = consequent
        self.confidence = confidence
        # support count of antecedent + consequent
        self.count = count

    def itemset(self):
        return tuple(sorted(self.antecedent + self.consequent))

    def __repr__(self):
        return "(" + repr(self.antecedent) + ", " + repr(self.consequent) + ", " + str(self.confidence) + ")"


class Associations:
    """The outcome of one mining run.

    :param
    @frequent_itemsets - the lattice, level k holding the frequent itemsets of size k + 1
    @rules - list of Rule objects that reached minconf
    @n_transactions - number of transactions the supports were counted over
    @item_names - optional labels of the item ids
    """
    def __init__(self, frequent_itemsets, rules, n_transactions, minsup, minconf, item_names=None):
        self.frequent_itemsets = frequent_itemsets
        self.rules = rules
        self.n_transactions = n_transactions
        self.minsup = minsup
        self.minconf = minconf
        self.item_names = item_names

    def itemsets(self):
        for level in self.frequent_itemsets:
            for itemset in level:
                yield itemset

    def format_itemset(self, itemset):
        if self.item_names is None:
            return " & ".join(str(item) for item in itemset)
        return " & ".join(str(self.item_names[item]) for item in itemset)

    def itemsets_frame(self):
        records = [{'itemset': self.format_itemset(itemset),
                    'size': len(itemset),
                    'count': itemset.count,
                    'support': itemset.support(self.n_transactions)}
                   for itemset in self.itemsets()]
        return pd.DataFrame(records, columns=['itemset', 'size', 'count', 'support'])

    def rules_frame(self):
        records = []
        for rule in self.rules:
            records.append({'antecedent': self.format_itemset(rule.antecedent),
                            'consequent': self.format_itemset(rule.consequent),
                            'antecedent_count': rule.antecedent.count,
                            'consequent_count': rule.consequent.count,
                            'support': rule.count / self.n_transactions,
                            'confidence': rule.confidence})
        frame = pd.DataFrame(records, columns=['antecedent', 'consequent', 'antecedent_count',
                                               'consequent_count', 'support', 'confidence'])
        return frame.sort_values('confidence', ascending=False, kind='mergesort').reset_index(drop=True)
