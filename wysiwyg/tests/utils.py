"""Test utilities."""

from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from ..runner import CommandResult

UI_SOURCE = """use nwd::NwgUi;

#[derive(Default, NwgUi)]
pub struct BasicApp {
    #[nwg_control(size: (300, 115), title: "Basic example")]
    window: nwg::Window,
}

fn main() {}
"""

PLAIN_SOURCE = """fn main() {
    println!("Hello, world!");
}
"""


class FakeCargo:
    """Stands in for `cargo init --bin` without spawning a process."""

    def __init__(self, result: CommandResult | None = None, write_files: bool = True):
        self.result = result or CommandResult(returncode=0)
        self.write_files = write_files
        self.calls: List[Tuple[str, List[str], Path]] = []

    def run(self, program: str, args: Sequence[str], cwd: Path) -> CommandResult:
        self.calls.append((program, list(args), Path(cwd)))
        if self.write_files and self.result.success:
            (cwd / "Cargo.toml").write_text(
                "[package]\n"
                f'name = "{cwd.name}"\n'
                'version = "0.1.0"\n'
                'edition = "2021"\n'
                "\n"
                "[dependencies]\n"
            )
            (cwd / "src").mkdir()
            (cwd / "src" / "main.rs").write_text(PLAIN_SOURCE)
        return self.result


def write_project(root: Path, manifest: str, sources: Dict[str, str] | None = None) -> Path:
    """Lay out a project with the given manifest text and source files."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "Cargo.toml").write_text(manifest)
    for name, text in (sources or {}).items():
        source = root / "src" / name
        source.parent.mkdir(parents=True, exist_ok=True)
        source.write_text(text)
    return root


