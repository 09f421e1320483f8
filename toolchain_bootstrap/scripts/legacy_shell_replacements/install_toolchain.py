# Python replacement for the toolchain install script:
#   curl --proto '=https' -sSf https://sh.rustup.rs | sh
#   source "$HOME/.cargo/env"
# Like the script, the installer's status is not checked and the exit status
# is the status of the sourcing step.
import sys

from toolchain_bootstrap.modules.env_sourcing import EnvSourcer
from toolchain_bootstrap.modules.installer_fetch import InstallerFetcher

RUSTUP_URL = 'https://sh.rustup.rs'
CARGO_ENV = '~/.cargo/env'


def main():
    # Install the toolchain
    InstallerFetcher().fetch_and_execute(RUSTUP_URL)
    # Load the toolchain environment into this process
    result, _ = EnvSourcer().source_and_apply(CARGO_ENV)
    return result.returncode

if __name__ == '__main__':
    sys.exit(main())
