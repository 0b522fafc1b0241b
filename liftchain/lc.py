import argparse
import logging
import sys

import liftchain
from liftchain import constants
from liftchain.config_loader import ConfigLoader
from liftchain.liftover import LiftOver
from liftchain.model import Locus
from liftchain.util import get_level, open_input_file, write_log_msg

root_p = argparse.ArgumentParser(
    description="liftchain genome coordinate liftover with UCSC chain files"
)
root_sp = root_p.add_subparsers(title="Commands")

# lift
lift_p = root_sp.add_parser(
    "lift",
    description="Lift loci written like chr1(+):12345 to another assembly",
    help="Lift loci over",
)
lift_p.add_argument(
    "chain", help="Chain file, or the source assembly name when --to is given"
)
lift_p.add_argument(
    "loci", nargs="*", default=["-"], help="Files with one locus per line. Default is stdin."
)
lift_p.add_argument(
    "--to", dest="to_db", default=None, help="Target assembly name, e.g. hg38"
)
lift_p.add_argument(
    "-o", "--output", dest="output", default="-", help="Output file. Default is stdout."
)
lift_p.add_argument("--conf", dest="conf", default=None, help="Configuration file")

# info
info_p = root_sp.add_parser(
    "info", description="Summarize a chain file", help="Summarize a chain file"
)
info_p.add_argument(
    "chain", help="Chain file, or the source assembly name when --to is given"
)
info_p.add_argument(
    "--to", dest="to_db", default=None, help="Target assembly name, e.g. hg38"
)
info_p.add_argument("--conf", dest="conf", default=None, help="Configuration file")

# version
version_p = root_sp.add_parser("version", help="Show version")


def setup_logger(conf, debug=False):
    logger = logging.getLogger("liftchain")
    if debug:
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(get_level(conf.get_val(constants.log_level_key)))
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(constants.log_format, "%Y/%m/%d %H:%M:%S"))
        logger.addHandler(handler)
    error_logger = logging.getLogger("error.liftchain")
    error_logger.setLevel("INFO")
    if not error_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(constants.error_log_format))
        error_logger.addHandler(handler)
    return logger


def lift(args, conf):
    logger = logging.getLogger("liftchain.lc")
    error_logger = logging.getLogger("error.liftchain")
    lifter = LiftOver(args.chain, to_db=args.to_db, conf=conf)
    num_lifted = 0
    num_unmapped = 0
    error_lines = 0
    if args.output == "-":
        wf = sys.stdout
    else:
        wf = open(args.output, "w")
    try:
        for input_path in args.loci:
            if input_path == "-":
                f = sys.stdin
            else:
                f = open_input_file(input_path)
            try:
                for ln, line in enumerate(f, start=1):
                    text = line.strip()
                    if text == "" or text.startswith("#"):
                        continue
                    try:
                        locus = Locus.parse(text)
                    except ValueError as e:
                        error_lines += 1
                        error_logger.error(
                            "\nLINE:{:d}\nINPUT:{}\nERROR:{}\n#".format(ln, text, str(e))
                        )
                        continue
                    mapped = lifter.lift(locus)
                    if mapped is None:
                        num_unmapped += 1
                        wf.write("{}\t{}\n".format(text, constants.unmapped_mark))
                    else:
                        num_lifted += 1
                        wf.write("{}\t{}\n".format(text, mapped))
            finally:
                if f is not sys.stdin:
                    f.close()
    finally:
        if wf is not sys.stdout:
            wf.close()
    logger.info("lifted: %d", num_lifted)
    logger.info("unmapped: %d", num_unmapped)
    logger.info("error lines: %d", error_lines)
    return num_lifted, num_unmapped, error_lines


def info(args, conf):
    chain = LiftOver(args.chain, to_db=args.to_db, conf=conf).chain
    print("lines: {}".format(chain.lines_processed))
    print("blocks: {}".format(len(chain)))
    for chromosome, strand in chain.keys():
        print(
            "{}({})\t{}".format(
                chromosome, strand.symbol, chain.num_blocks(chromosome, strand)
            )
        )


def show_version(args, conf):
    print(liftchain.__version__)


lift_p.set_defaults(func=lift)
info_p.set_defaults(func=info)
version_p.set_defaults(func=show_version)


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    # Global parser silently consumes the --debug option
    # --debug is used below in case of exceptions
    global_parser = argparse.ArgumentParser(add_help=False)
    global_parser.add_argument("--debug", action="store_true")
    global_args, cmd_toks = global_parser.parse_known_args(argv)
    args = root_p.parse_args(cmd_toks)
    if not hasattr(args, "func"):
        root_p.print_help(sys.stderr)
        return 1
    logger = logging.getLogger("liftchain")
    try:
        conf = ConfigLoader(getattr(args, "conf", None))
        logger = setup_logger(conf, debug=global_args.debug)
        args.func(args, conf)
    except Exception as e:
        if global_args.debug:
            logger.exception(e)
        else:
            write_log_msg(logger, e)
            print("Repeat command with --debug for more details", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
