import sys
from pathlib import Path

from colorama import init, Fore, Style

from .config import load_config
from .errors import ScrapeError
from .log import configure_logging
from .scraper import GitScraper

USAGE = "Usage: gitscrape [--verbose] [--config <file>] <ls-files <url> | download <url> [target_dir] | show-config>"


def printable(path: str) -> str:
    # tree names that are not UTF-8 carry lone surrogates after decoding
    return path.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


def split_options(argv):
    """Pull the global flags out of ``argv`` wherever they appear."""
    args = []
    options = {"verbose": False, "config": None}
    index = 0
    while index < len(argv):
        arg = argv[index]
        if arg in ("-v", "--verbose"):
            options["verbose"] = True
        elif arg == "--config":
            if index + 1 >= len(argv):
                raise ValueError("--config needs a file path")
            options["config"] = Path(argv[index + 1])
            index += 1
        else:
            args.append(arg)
        index += 1
    return args, options


def main(argv=None):
    init(autoreset=True)

    try:
        args, options = split_options(sys.argv[1:] if argv is None else argv)
    except ValueError as e:
        print(Fore.RED + Style.BRIGHT + str(e), file=sys.stderr)
        sys.exit(1)

    if not args:
        print(Fore.RED + Style.BRIGHT + USAGE, file=sys.stderr)
        sys.exit(1)

    configure_logging(verbose=options["verbose"])
    command = args[0]

    try:
        config = load_config(options["config"])
    except ScrapeError as e:
        print(Fore.RED + Style.BRIGHT + f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    if command == "ls-files":
        if len(args) != 2:
            print(Fore.RED + Style.BRIGHT + "Usage: gitscrape ls-files <url>", file=sys.stderr)
            sys.exit(1)
        try:
            scraper = GitScraper(args[1], config=config)
            scraper.fetch()
            print(Fore.YELLOW + Style.BRIGHT + "\n=== Files ===")
            for entry in scraper.get_files():
                print(Fore.BLUE + f"  {entry.mode:>6} {entry.hash} " + Style.BRIGHT + printable(entry.path))
            print(Fore.YELLOW + "-" * 32)
        except (ScrapeError, OSError) as e:
            print(Fore.RED + Style.BRIGHT + f"Error during ls-files: {e}", file=sys.stderr)
            sys.exit(1)

    elif command == "download":
        if len(args) not in (2, 3):
            print(Fore.RED + Style.BRIGHT + "Usage: gitscrape download <url> [target_dir]", file=sys.stderr)
            sys.exit(1)
        target_dir = args[2] if len(args) == 3 else "."
        try:
            scraper = GitScraper(args[1], config=config)
            scraper.fetch()
            written = scraper.download(target_dir)
            print(Fore.GREEN + Style.BRIGHT + f"✔ Downloaded {len(written)} files into {target_dir}")
        except (ScrapeError, OSError) as e:
            print(Fore.RED + Style.BRIGHT + f"Error during download: {e}", file=sys.stderr)
            sys.exit(1)

    elif command == "show-config":
        print(Fore.YELLOW + Style.BRIGHT + "\n=== Config ===")
        for key, value in config.as_dict().items():
            print(Fore.BLUE + f"  {key}: " + Style.BRIGHT + str(value))

    else:
        print(Fore.RED + Style.BRIGHT + f"Unknown command #{command}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
