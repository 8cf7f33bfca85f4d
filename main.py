from rich.pretty import pprint

from optlong import *

__prog__ = "demo"

verbose = Slot(0)
includes = []


def usage():
    pprint("usage: demo [-v] [-I DIR]... [-D KEY=VALUE]... FILE...")


if __name__ == '__main__':
    parser = OptionParser({
        "h|help": usage,
        "v|verbose+": verbose,
        "I|include=s@": includes,
    }, shell=True)
    args = parser.process_some()

    results, files = getoptions(["D|define=s%", "n|dry-run"], args, shell=True, fancy=True)
    pprint(parser)
    pprint(results)
    pprint(files)
