from ruleminer.Associations import Associations, Rule
from ruleminer.Errors import (EmptyTransactionSetError, KeyLengthError, LatticeConsistencyError,
                              RuleMinerError)
from ruleminer.HashTree import HashTree
from ruleminer.Hasher import DefaultHasher, Hasher, ModHasher
from ruleminer.Itemset import Itemset
from ruleminer.RuleMiner import (RuleMiner, apriori_gen, count_support, get_frequent_itemsets,
                                 read_item_names, read_transactions, rule_gen)
