from rich.pretty import pprint

from argline import *


if __name__ == '__main__':
    parser = Parser("my_program", "my_program [options]", "This is a sample program.", "Epilog message")
    parser.declare_positional("o", "output", False, 1, "default_output.txt", "Output file")
    parser.declare_key_value("v", "verbose", False, "false", "Enable verbose mode")

    parser.parse()

    if parser.get_flag("help"):
        parser.print_help()
        parser.close()
        raise SystemExit(0)

    pprint(parser.arguments)
    print("Output: %s" % parser.get_positional("output"))
    print("Verbose: %s" % parser.get_key_value("verbose"))
    parser.close()
