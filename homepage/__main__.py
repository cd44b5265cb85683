import argparse
import sys

from homepage.config import load_config


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="homepage", description="Build and preview the personal site.")
    parser.add_argument("--config", help="Path to config.yml (default: ./config.yml)")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("build", help="Build the site into the output directory.")
    commands.add_parser("watch", help="Build, then rebuild whenever content changes.")

    post = commands.add_parser("post", help="Print one post's body as JSON lines, rebuilding on change.")
    post.add_argument("name", help="Blog post id")

    serve = commands.add_parser("serve", help="Live preview of one blog post.")
    serve.add_argument("--post", required=True, dest="name", help="Blog post id")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    cfg = load_config(args.config)

    if args.command == "build":
        from homepage.build import build_site

        build_site(cfg)
        return 0
    if args.command == "watch":
        from homepage.watch import main as watch_main

        return watch_main(cfg)
    if args.command == "post":
        from homepage.post import main as post_main

        return post_main(cfg, args.name)
    from homepage.serve import main as serve_main

    return serve_main(cfg, args.name)


if __name__ == "__main__":
    sys.exit(main())
