import argparse
import logging
from pathlib import Path

from .config import loadConfig
from .persistent import StateStore
from .store_file import FileStore
from .UI import UI

def main() -> None:
    config = loadConfig()

    parser = argparse.ArgumentParser(
        prog='stopwatch-sync',
        description='A stopwatch shared by every instance opened on the same store file.',
    )
    parser.add_argument('--store', default=str(config.store_path), help='Path of the shared store file.')
    parser.add_argument('--key', default=config.store_key, help='Key the state is kept under.')
    args = parser.parse_args()

    # The terminal belongs to the UI, so logs only go to a file.
    if config.log_file is not None:
        logging.basicConfig(
            filename=config.log_file, level=config.log_level.upper(),
            format='%(asctime)s %(name)s %(levelname)s %(message)s',
        )
    else:
        logging.disable(logging.CRITICAL)

    store = StateStore(FileStore(Path(args.store).expanduser()), key=args.key)
    UI(store, poll_interval=config.poll_interval).run()

if __name__ == '__main__':
    main()
