"""Shared access setter documents used across the test suite.

Single source of truth for RAS documents so that parser, registry,
application and rewrite tests agree on the same inputs.
"""

HEADER = "RAS 1 std"

FOO = "com/example/Foo"
OUTER = "com/example/Outer"
INNER = "com/example/Outer$Inner"

ACC_PUBLIC = 0x0001
ACC_PRIVATE = 0x0002
ACC_PROTECTED = 0x0004
ACC_STATIC = 0x0008
ACC_FINAL = 0x0010
ACC_SYNCHRONIZED = 0x0020
ACC_VOLATILE = 0x0040
ACC_TRANSIENT = 0x0080

# Swaps visibility of the class and toggles flags on one method and one field.
# Every line is hard failing, so any broken precondition surfaces as an error.
ROUND_TRIP_LINES = [
    f"!a private 0 {FOO}",
    f"!a 0 public {FOO}",
    f"!a 0 final {FOO} run ()V",
    f"!a static 0 {FOO} run ()V",
    f"!a 0 transient {FOO} cache Ljava/util/Map;",
]

COMMENTED_DOCUMENT = f"""# Access setter for the example project

{HEADER}
# make Foo public
 a 0 public {FOO}
@b public public {FOO} run ()V
!r final 0 {FOO} count I
"""


def ras(*lines: str, header: str = HEADER) -> str:
    """Build a RAS document from a header and transform lines."""
    return "\n".join([header, *lines]) + "\n"
