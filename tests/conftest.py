import os
import textwrap
from pathlib import Path

import pytest

# Subprocess coverage for CLI runs started with COVERAGE_PROCESS_START set
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()


MAIN_SOURCE = textwrap.dedent(
    """\
    /** Computes the average of a sequence of integers. */
    class Main {
        static boolean verbose;

        function void main() {
            var Array a;
            var int length;
            var int i, sum;

            let length = Keyboard.readInt("How many numbers? ");
            let a = Array.new(length); // constructs the array
            let i = 0;
            let sum = 0;
            while (i < length) {
                let a[i] = Keyboard.readInt("Enter a number: ");
                let sum = sum + a[i];
                let i = i + 1;
            }
            if (~(length = 0) & verbose) {
                do Output.printString("The average is ");
                do Output.printInt(sum / length);
            } else {
                do Output.println();
            }
            return;
        }
    }
    """
)

SQUARE_SOURCE = textwrap.dedent(
    """\
    class Square {
        field int x, y;
        field int size;

        /* Constructs a new square
           with a given location and size. */
        constructor Square new(int Ax, int Ay, int Asize) {
            let x = Ax;
            let y = Ay;
            let size = Asize;
            do draw();
            return this;
        }

        method void dispose() {
            do Memory.deAlloc(this);
            return;
        }

        method void draw() {
            do Screen.setColor(true);
            do Screen.drawRectangle(x, y, x + size, y + size);
            return;
        }

        method boolean fits(int limit) {
            return (x + size < limit) | (-y > 0);
        }
    }
    """
)


@pytest.fixture
def main_source() -> str:
    return MAIN_SOURCE


@pytest.fixture
def square_source() -> str:
    return SQUARE_SOURCE


@pytest.fixture
def jack_dir(tmp_path: Path) -> Path:
    """A directory holding two valid sources and one stray non-source file."""
    (tmp_path / "Main.jack").write_text(MAIN_SOURCE, encoding="utf-8")
    (tmp_path / "Square.jack").write_text(SQUARE_SOURCE, encoding="utf-8")
    (tmp_path / "README.txt").write_text("not a source file", encoding="utf-8")
    return tmp_path
