import logging

from ruleminer.Errors import KeyLengthError

logger = logging.getLogger(__name__)


# ############################# Class HashTree #############################
class HashTree:
    """Index of fixed-length key tuples.

    Every internal node branches on the hash of the key item at its own depth, leaves keep the
    raw tuples. A leaf that already holds max_leaf tuples is turned into an internal node on the
    next insertion, unless it hangs at the last key position where nothing is left to branch on.

    :param
    @hasher - object with a hash(item) method returning the bucket id of an item
    @max_leaf - the maximum number of tuples in a leaf before it splits
    @list_len - the length of every key tuple stored in the tree
    """
    def __init__(self, hasher, max_leaf, list_len):
        if list_len < 1:
            raise ValueError("key tuples must hold at least one item, got list_len=%r" % list_len)
        if max_leaf < 1:
            raise ValueError("max_leaf must be positive, got %r" % max_leaf)
        self.hasher = hasher
        self.max_leaf = max_leaf
        self.list_len = list_len
        self.root = InternalNode(0)
        self.size = 0

    def insert(self, key):
        key = self._check_length(key)
        self.root.add(key, self.max_leaf, self.hasher, self.list_len)
        self.size += 1

    def contains(self, key):
        key = self._check_length(key)

        node = self.root
        for depth in range(self.list_len):
            node = node.get_child(self.hasher.hash(key[depth]))
            if node is None:
                return False
            if isinstance(node, LeafNode):
                break

        # several keys can share every bucket probed so far
        return key in node.keys

    def __contains__(self, key):
        return self.contains(key)

    def __len__(self):
        return self.size

    def _check_length(self, key):
        key = tuple(key)
        if len(key) != self.list_len:
            raise KeyLengthError("Length does not match: the tree stores %d-tuples, got %r"
                                 % (self.list_len, key))
        return key


class InternalNode:
    def __init__(self, depth):
        self.depth = depth
        self.children = dict()

    def get_child(self, hashcode):
        return self.children.get(hashcode)

    def add(self, key, max_leaf, hasher, list_len):
        hashcode = hasher.hash(key[self.depth])
        child = self.get_child(hashcode)

        if child is None:
            leaf = LeafNode(self.depth + 1)
            leaf.add(key)
            self.children[hashcode] = leaf

        elif isinstance(child, InternalNode):
            child.add(key, max_leaf, hasher, list_len)

        elif child.count < max_leaf or self.depth == list_len - 1:
            child.add(key)

        else:
            # split the full leaf, re-inserting its keys one level deeper
            logger.debug("splitting leaf of %d keys at depth %d", child.count, child.depth)
            node = InternalNode(self.depth + 1)
            for stored in child.keys:
                node.add(stored, max_leaf, hasher, list_len)
            node.add(key, max_leaf, hasher, list_len)
            self.children[hashcode] = node


class LeafNode:
    def __init__(self, depth):
        self.depth = depth
        self.keys = list()
        self.count = 0

    def add(self, key):
        self.keys.append(key)
        self.count += 1
