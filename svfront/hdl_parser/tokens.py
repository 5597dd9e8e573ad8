"""
Token types, leaf tokens and the source cursor for the SystemVerilog front end.

A `Span` is an immutable view into the source buffer: the buffer itself plus
an offset and the line/column of that offset. Advancing a span returns a new
span; the old one is untouched, which is what lets every production retry
from the same position after a failed alternative.
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass, field


class TokenType(Enum):
    # Identifiers
    SIMPLE_IDENT = auto()       # my_signal
    ESCAPED_IDENT = auto()      # \bus+index
    SYSTEM_IDENT = auto()       # $clog2
    KEYWORD = auto()            # this, super, $root, $unit, int, with, ...

    # Literals
    UNSIGNED_NUMBER = auto()    # 42, 1_000
    BASED_NUMBER = auto()       # 8'hFF, 4'b1010, 'd7, 8'sd5
    UNBASED_UNSIZED = auto()    # '0, '1, 'x, 'z
    REAL_NUMBER = auto()        # 1.5, 2.5e10, 1e-3
    STRING = auto()             # "hello"

    # Punctuation and operators
    SYMBOL = auto()             # { } , (* *) = '{ :: . [ ] : +: -: ...


@dataclass(frozen=True)
class Token:
    """A leaf of the syntax tree: a located slice of the source buffer.

    The text is not copied out of the buffer; `value` slices it on demand.
    """
    type: TokenType
    source: str = field(repr=False)
    offset: int
    length: int
    line: int
    col: int

    @property
    def value(self) -> str:
        return self.source[self.offset:self.offset + self.length]

    @property
    def end(self) -> int:
        return self.offset + self.length

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r}, L{self.line}:{self.col})"


@dataclass(frozen=True)
class Span:
    """Cursor into an immutable source buffer."""
    source: str = field(repr=False)
    offset: int = 0
    line: int = 1
    col: int = 1

    @property
    def rest(self) -> str:
        """Unconsumed text (copies; meant for tests and diagnostics)."""
        return self.source[self.offset:]

    def at_end(self) -> bool:
        return self.offset >= len(self.source)

    def peek(self, ahead: int = 0) -> str:
        p = self.offset + ahead
        if p < len(self.source):
            return self.source[p]
        return "\0"

    def startswith(self, text: str) -> bool:
        return self.source.startswith(text, self.offset)

    def advance(self, n: int) -> Span:
        if n == 0:
            return self
        end = self.offset + n
        newlines = self.source.count("\n", self.offset, end)
        if newlines:
            col = end - self.source.rfind("\n", self.offset, end)
            return Span(self.source, end, self.line + newlines, col)
        return Span(self.source, end, self.line, self.col + n)

    def token(self, tt: TokenType, length: int) -> Token:
        """Token covering `length` characters starting at this span."""
        return Token(tt, self.source, self.offset, length, self.line, self.col)

    def __repr__(self):
        preview = self.source[self.offset:self.offset + 20]
        return f"Span(L{self.line}:{self.col}, {preview!r})"


# IEEE 1800-2017 reserved words (Annex B). None of these is a simple identifier.
KEYWORDS: frozenset[str] = frozenset("""
    accept_on alias always always_comb always_ff always_latch and assert assign
    assume automatic before begin bind bins binsof bit break buf bufif0 bufif1
    byte case casex casez cell chandle checker class clocking cmos config const
    constraint context continue cover covergroup coverpoint cross deassign
    default defparam design disable dist do edge else end endcase endchecker
    endclass endclocking endconfig endfunction endgenerate endgroup
    endinterface endmodule endpackage endprimitive endprogram endproperty
    endspecify endsequence endtable endtask enum event eventually expect
    export extends extern final first_match for force foreach forever fork
    forkjoin function generate genvar global highz0 highz1 if iff ifnone
    ignore_bins illegal_bins implements implies import incdir include initial
    inout input inside instance int integer interconnect interface intersect
    join join_any join_none large let liblist library local localparam logic
    longint macromodule matches medium modport module nand negedge nettype
    new nexttime nmos nor noshowcancelled not notif0 notif1 null or output
    package packed parameter pmos posedge primitive priority program property
    protected pull0 pull1 pulldown pullup pulsestyle_ondetect
    pulsestyle_onevent pure rand randc randcase randsequence rcmos real
    realtime ref reg reject_on release repeat restrict return rnmos rpmos
    rtran rtranif0 rtranif1 s_always s_eventually s_nexttime s_until
    s_until_with scalared sequence shortint shortreal showcancelled signed
    small soft solve specify specparam static string strong strong0 strong1
    struct super supply0 supply1 sync_accept_on sync_reject_on table tagged
    task this throughout time timeprecision timeunit tran tranif0 tranif1 tri
    tri0 tri1 triand trior trireg type typedef union unique unique0 unsigned
    until until_with untyped use uwire var vectored virtual void wait
    wait_order wand weak weak0 weak1 while wildcard wire with within wor xnor
    xor
""".split())

INTEGER_ATOM_TYPES: frozenset[str] = frozenset(
    ["byte", "shortint", "int", "longint", "integer", "time"]
)

INTEGER_VECTOR_TYPES: frozenset[str] = frozenset(["bit", "logic", "reg"])
