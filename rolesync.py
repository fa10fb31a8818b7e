"""Entry point for the role sync server.

Runs setup, then either performs one sweep (`--sync-all`) or serves the
webhook listener with uvicorn.
"""
import asyncio
import sys

from rolesync_lib.setup import STORE_KEY, STORE_NS, get_loaded_config, get_parser, parse_args, setup
from rolesync_lib.storage.file_backend import FileStorageBackend


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    args = parse_args(argv)
    if args.help:
        get_parser().print_help()
        return 0

    storage = FileStorageBackend(data_dir=args.data_dir)
    rc = setup(argv, storage, STORE_NS, STORE_KEY)
    if rc != 0 or args.print_template:
        return rc

    if args.sync_all:
        from rolesync_lib.bootstrap import run_sweep_once
        from rolesync_lib.logging_config import configure_logging

        configure_logging(storage.data_dir / STORE_NS / f"{STORE_KEY}.yml")
        return asyncio.run(run_sweep_once(get_loaded_config(), apply=args.apply))

    import uvicorn
    from rolesync_lib.main import create_app, Config

    app = create_app(Config(data_dir=args.data_dir))
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
