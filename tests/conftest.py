import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)


def pytest_sessionstart(session):
    import mrzkit  # noqa: WPS433 (import inside function for guard)

    resolved = pathlib.Path(mrzkit.__file__).resolve()
    if ROOT not in resolved.parents:
        raise RuntimeError(
            f"Pytest is importing mrzkit from {resolved}. "
            "Run: pip uninstall -y mrzkit && pip install -e ."
        )
