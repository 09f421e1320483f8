import os

import pytest
import requests

# Writes a rustup-style env file under $HOME and records its arguments
FAKE_INSTALLER = b'''mkdir -p "$HOME/.cargo/bin"
printf '%s\\n' "$@" > "$HOME/installer-args.txt"
cat > "$HOME/.cargo/env" <<'EOF'
case ":${PATH}:" in
    *:"$HOME/.cargo/bin":*)
        ;;
    *)
        export PATH="$HOME/.cargo/bin:$PATH"
        ;;
esac
export CARGO_HOME="$HOME/.cargo"
EOF
'''


class FakeResponse:
    def __init__(self, content=b"", status_code=200):
        self.content = content
        self.status_code = status_code


@pytest.fixture
def fake_home(tmp_path, monkeypatch):
    """A temporary HOME; PATH and CARGO_HOME are restored after the test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("PATH", os.environ.get("PATH", "/usr/bin:/bin"))
    monkeypatch.setenv("CARGO_HOME", "")
    monkeypatch.delenv("CARGO_HOME")
    return home


@pytest.fixture
def serve_installer(monkeypatch):
    """Replace requests.get; returns the list of requested URLs."""
    calls = []

    def install(content=FAKE_INSTALLER, status_code=200, error=None):
        def fake_get(url, **kwargs):
            calls.append(url)
            if error is not None:
                raise error
            return FakeResponse(content, status_code)
        monkeypatch.setattr(requests, "get", fake_get)
        return calls

    return install


@pytest.fixture
def network_down(serve_installer):
    return serve_installer(error=requests.exceptions.ConnectionError(
        "Failed to resolve 'sh.rustup.rs' (NameResolutionError)"))
