import os
import sys
from pathlib import Path

import pytest


# Ensure the package root is importable when running tests without install
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


TEMPLATE = """[Interface]
PrivateKey = CLIENTPRIV=
ListenPort = 13231
Address = 10.7.0.12/32

[Peer]
PublicKey = SERVERKEY=
Endpoint = 1.2.3.4:13231
"""

EXPORT = """# oct/17/2026 10:00:00 by RouterOS 7.16
# software id = ABCD-1234
/interface wireguard
add listen-port=13231 mtu=1420 name=wg1
/interface wireguard peers
add allowed-address=10.7.0.12/32 client-address=10.7.0.12/32 client-dns=10.7.0.1 \\
    endpoint-address=1.2.3.4 endpoint-port=13231 interface=wg1 name=alice \\
    private-key="PRIVA=" preshared-key="PSKA=" public-key="PUBA="
add allowed-address=10.7.0.20/32 interface=wg1 name=server-side public-key="PUBS=" responder=yes
add client-address=10.7.0.13/32 endpoint-address=1.2.3.4 endpoint-port=13231 interface=wg1 \\
    name=bob private-key="PRIVB=" preshared-key="PSKB=" public-key="PUBB="
/ip address
add address=10.7.0.1/24 interface=wg1 network=10.7.0.0
"""


@pytest.fixture
def template_text() -> str:
    return TEMPLATE


@pytest.fixture
def export_text() -> str:
    return EXPORT


@pytest.fixture
def inputs_dir(tmp_path, monkeypatch):
    """tmp dir holding wg.conf and wg.rsc, used as cwd with no settings env."""
    (tmp_path / "wg.conf").write_text(TEMPLATE)
    (tmp_path / "wg.rsc").write_text(EXPORT)
    for key in list(os.environ):
        if key.startswith("WGRS_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path
