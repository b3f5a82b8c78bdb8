# ############################# Class Hasher #############################
class Hasher:
    """Maps an item of a key tuple to an integer bucket id.

    Any object with a ``hash(item)`` method returning an int can be used by the HashTree.
    """

    def hash(self, item):
        raise NotImplementedError


class DefaultHasher(Hasher):
    # buckets on the built-in hash of the item
    def hash(self, item):
        return hash(item)


class ModHasher(Hasher):
    def __init__(self, k):
        if k < 1:
            raise ValueError("ModHasher needs at least one bucket, got %r" % k)
        self.k = k

    def hash(self, item):
        return item % self.k

    def __repr__(self):
        return "ModHasher(%d)" % self.k
