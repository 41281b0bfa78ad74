from __future__ import annotations

from gameshelf.ui.cli import run

run()
