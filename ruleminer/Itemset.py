# ############################# Class Itemset #############################
class Itemset(list):
    """Ascending list of item ids together with its support count.

    Two itemsets are equal when their items are equal; the count takes no part in the comparison.
    """
    def __init__(self, items=(), count=0):
        super().__init__(items)
        self.count = count

    def key(self):
        return tuple(self)

    def support(self, n_transactions):
        return self.count / n_transactions

    def __repr__(self):
        return "(" + str(list(self)) + ", " + str(self.count) + ")"
