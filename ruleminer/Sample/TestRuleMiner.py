import argparse
import logging
import sys

from ruleminer.RuleMiner import RuleMiner, print_itemsets, print_rules, read_item_names, read_transactions


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Mine frequent itemsets and association rules with Apriori")
    parser.add_argument("data", help="transaction file, one transaction per line")
    parser.add_argument("--items", help="file with the label of each item, one per line")
    parser.add_argument("--minsup", type=float, default=0.45, help="minimum support in (0, 1]")
    parser.add_argument("--minconf", type=float, default=0.95, help="minimum confidence in (0, 1]")
    parser.add_argument("--market-basket", action="store_true",
                        help="every value is an item instead of every attribute value")
    parser.add_argument("--sep", default=",", help="field separator (regular expression)")
    parser.add_argument("--header", action="store_true", help="first line holds the attribute names")
    parser.add_argument("--max-leaf", type=int, default=3, help="candidates in a hash tree leaf before it splits")
    parser.add_argument("--verbose", action="store_true", help="log every mining step")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s')

    print("Reading file...")
    data = read_transactions(args.data, market_basket=args.market_basket, sep=args.sep, header=args.header)
    item_names = read_item_names(args.items) if args.items else None

    miner = RuleMiner(minsup=args.minsup, minconf=args.minconf, input_data=data,
                      market_basket=args.market_basket, item_names=item_names, max_leaf=args.max_leaf)
    associations = miner.fit()

    print("The frequent itemsets generated are as follows:")
    for line in print_itemsets(associations):
        print(line)

    print()
    print("The rules generated are as follows:")
    for line in print_rules(associations):
        print(line)

    return 0


if __name__ == "__main__":
    sys.exit(main())
