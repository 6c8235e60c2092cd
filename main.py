from rich.pretty import pprint

from pennant import *

__prog__ = "pennant-demo"

verbose = declare("verbose", "V", Kind.BOOL)
repl = declare("repl", "r")
port = declare("port", "p", Kind.INT)
directory = declare("dir", "d", Kind.STR)


if __name__ == '__main__':
    registry = Registry(verbose, repl, port, directory, verbose=True, shell=True, fancy=True)
    parse(registry)
    pprint(registry)
    print(getbool(verbose), getpresence(repl), getint(port, 3000), getstr(directory, "./"))
