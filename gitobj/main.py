import logging
import sys

from gitobj.models import Git, GitObjError, PartialFailure
from gitobj.utils import get_parser

logger = logging.getLogger(__name__)

FATAL_EXIT_CODE = 128


def run(git, args):
    match args.command:
        case "init":
            return git.init_repo()
        case "cat-file":
            return git.cat_file(args.hash, pretty_print=args.pretty_print)
        case "hash-object":
            return git.hash_object(args.path, write=args.write)
        case "ls-tree":
            return git.ls_tree(args.hash_value, name_only=args.name_only)
        case "write-tree":
            return git.write_tree()
        case "commit-tree":
            return git.commit_tree(args.tree_hash, args.message, parent=args.parent)
        case _:
            raise RuntimeError(f"Unknown command #{args.command}")


def main(argv=None) -> int:
    parser = get_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        run(Git(), args)
    except PartialFailure as e:
        for path, error in e.failures:
            sys.stderr.write(f"error: {path}: {error}\n")
        sys.stderr.write(f"fatal: {e}\n")
        return FATAL_EXIT_CODE
    except (GitObjError, OSError) as e:
        logger.debug("%s failed", args.command, exc_info=True)
        sys.stderr.write(f"fatal: {e}\n")
        return FATAL_EXIT_CODE
    return 0


if __name__ == "__main__":
    sys.exit(main())
