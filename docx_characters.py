# -*- coding: utf-8 -*-
"""
Unicode equivalents for characters Word stores as `w:sym` in the Symbol and
Wingdings fonts. Word writes the code shifted into the private-use area
(w:char="F061" for Symbol alpha); the tables are keyed by the unshifted value.

Symbol:    http://en.wikipedia.org/wiki/Symbol_%28typeface%29
Wingdings: http://www.alanwood.net/demos/wingdings.html
"""
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

SYM_CHAR_OFFSET = 0xF000

SYMBOL: Dict[int, str] = {
    33: "!",
    34: "\u2200",
    35: "#",
    36: "\u2203",
    37: "%",
    38: "&",
    39: "\u220d",
    40: "(",
    41: ")",
    42: "*",
    43: "+",
    44: ",",
    45: "-",
    46: ".",
    47: "/",
    48: "0",
    49: "1",
    50: "2",
    51: "3",
    52: "4",
    53: "5",
    54: "6",
    55: "7",
    56: "8",
    57: "9",
    58: ":",
    59: ";",
    60: "<",
    61: "=",
    62: ">",
    63: "?",
    64: "\u2245",
    65: "\u0391",
    66: "\u0392",
    67: "\u03a7",
    68: "\u0394",
    69: "\u0395",
    70: "\u03a6",
    71: "\u0393",
    72: "\u0397",
    73: "\u0399",
    74: "\u03d1",
    75: "\u039a",
    76: "\u039b",
    77: "\u039c",
    78: "\u039d",
    79: "\u039f",
    80: "\u03a0",
    81: "\u0398",
    82: "\u03a1",
    83: "\u03a3",
    84: "\u03a4",
    85: "\u03a5",
    86: "\u03c2",
    87: "\u03a9",
    88: "\u039e",
    89: "\u03a8",
    90: "\u0396",
    91: "[",
    92: "\u2234",
    93: "]",
    94: "\u22a5",
    95: "_",
    96: "\uf8e5",
    97: "\u03b1",
    98: "\u03b2",
    99: "\u03c7",
    100: "\u03b4",
    101: "\u03b5",
    102: "\u03c6",
    103: "\u03b3",
    104: "\u03b7",
    105: "\u03b9",
    106: "\u03d5",
    107: "\u03ba",
    108: "\u03bb",
    109: "\u03bc",
    110: "\u03bd",
    111: "\u03bf",
    112: "\u03c0",
    113: "\u03b8",
    114: "\u03c1",
    115: "\u03c3",
    116: "\u03c4",
    117: "\u03c5",
    118: "\u03d6",
    119: "\u03c9",
    120: "\u03be",
    121: "\u03c8",
    122: "\u03b6",
    123: "{",
    124: "|",
    125: "}",
    126: "~",
    127: ".",
    160: "\u20ac",
    161: "\u03d2",
    162: "\u02b9",
    163: "\u2264",
    164: "\u2044",
    165: "\u221e",
    166: "\u0192",
    167: "\u2663",
    168: "\u2666",
    169: "\u2665",
    170: "\u2660",
    171: "\u2194",
    172: "\u2190",
    173: "\u2191",
    174: "\u2192",
    175: "\u2193",
    176: "\u00b0",
    177: "\u00b1",
    178: "\u02ba",
    179: "\u2265",
    180: "\u00d7",
    181: "\u221d",
    182: "\u2202",
    183: "\u2022",
    184: "\u00f7",
    185: "\u2260",
    186: "\u2261",
    187: "\u2248",
    188: "\u2026",
    189: "\u23d0",
    190: "\u23af",
    191: "\u21b5",
    192: "\u2135",
    193: "\u2111",
    194: "\u211c",
    195: "\u2118",
    196: "\u2297",
    197: "\u2295",
    198: "\u2205",
    199: "\u2229",
    200: "\u222a",
    201: "\u2283",
    202: "\u2287",
    203: "\u2284",
    204: "\u2282",
    205: "\u2286",
    206: "\u2208",
    207: "\u2209",
    208: "\u2220",
    209: "\u2207",
    210: "\u00ae",
    211: "\u00a9",
    212: "\u2122",
    213: "\u220f",
    214: "\u221a",
    215: "\u22c5",
    216: "\u00ac",
    217: "\u2227",
    218: "\u2228",
    219: "\u21d4",
    220: "\u21d0",
    221: "\u21d1",
    222: "\u21d2",
    223: "\u21d3",
    224: "\u25ca",
    225: "\u3008",
    226: "\u00ae",
    227: "\u00a9",
    228: "\u2122",
    229: "\u2211",
    230: "\u239b",
    231: "\u239c",
    232: "\u239d",
    233: "\u23a1",
    234: "\u23a2",
    235: "\u23a3",
    236: "\u23a7",
    237: "\u23a8",
    238: "\u23a9",
    239: "\u23aa",
    241: "\u3009",
    242: "\u222b",
    243: "\u2320",
    244: "\u23ae",
    245: "\u2321",
    246: "\u239e",
    247: "\u239f",
    248: "\u23a0",
    249: "\u23a4",
    250: "\u23a5",
    251: "\u23a6",
    252: "\u23ab",
    253: "\u23ac",
    254: "\u23ad",
}

WINGDINGS: Dict[int, str] = {
    33: "\u270f",
    34: "\u2702",
    35: "\u2701",
    36: "\U0001f453",
    37: "\U0001f514",
    38: "\U0001f4d6",
    39: "(Candle \u2013 no equivalent)",
    40: "\u260e",
    41: "\u2706",
    42: "\u2709",
    43: "(Envelope with address and stamp \u2013 no equivalent)",
    44: "\U0001f4ea",
    45: "\U0001f4eb",
    46: "\U0001f4ec",
    47: "\U0001f4ed",
    48: "\U0001f4c1",
    49: "\U0001f4c2",
    50: "\U0001f4c4",
    51: "(Printed page \u2013 no equivalent)",
    52: "(Stack of printed pages \u2013 no equivalent)",
    53: "(Filing cabinet \u2013 no equivalent)",
    54: "\u231b",
    55: "\u2328",
    56: "(Mouse \u2013 no equivalent)",
    57: "(Trackball \u2013 no equivalent)",
    58: "\U0001f4bb",
    59: "(Hard disk \u2013 no equivalent)",
    60: "\U0001f4be",
    61: "(5\u00bc\" Floppy disk \u2013 no equivalent)",
    62: "\u2707",
    63: "\u270d",
    64: "(Writing left hand \u2013 no equivalent)",
    65: "\u270c",
    66: "\U0001f44c",
    67: "\U0001f44d",
    68: "\U0001f44e",
    69: "\u261c",
    70: "\u261e",
    71: "\u261d",
    72: "\u261f",
    73: "\u270b",
    74: "\u263a",
    75: "\U0001f610",
    76: "\u2639",
    77: "\U0001f4a3",
    78: "\u2620",
    79: "\u2690",
    80: "\U0001f6a9",
    81: "\u2708",
    82: "\u263c",
    83: "\U0001f4a7",
    84: "\u2744",
    85: "(White Latin cross \u2013 no equivalent)",
    86: "\u271e",
    87: "(Celtic cross \u2013 no equivalent)",
    88: "\u2720",
    89: "\u2721",
    90: "\u262a",
    91: "\u262f",
    92: "\u0950",
    93: "\u2638",
    94: "\u2648",
    95: "\u2649",
    96: "\u264a",
    97: "\u264b",
    98: "\u264c",
    99: "\u264d",
    100: "\u264e",
    101: "\u264f",
    102: "\u2650",
    103: "\u2651",
    104: "\u2652",
    105: "\u2653",
    106: "&",
    107: "&",
    108: "\u25cf",
    109: "\u274d",
    110: "\u25a0",
    111: "\u25a1",
    112: "(Bold white square \u2013 no equivalent)",
    113: "\u2751",
    114: "\u2752",
    115: "\u2b27",
    116: "\u29eb",
    117: "\u25c6",
    118: "\u2756",
    119: "\u2b25",
    120: "\u2327",
    121: "\u2353",
    122: "\u2318",
    123: "\u2740",
    124: "\u273f",
    125: "\u275d",
    126: "\u275e",
    127: "\u25af",
    128: "\u24ea",
    129: "\u2460",
    130: "\u2461",
    131: "\u2462",
    132: "\u2463",
    133: "\u2464",
    134: "\u2465",
    135: "\u2466",
    136: "\u2467",
    137: "\u2468",
    138: "\u2469",
    139: "\u24ff",
    140: "\u2776",
    141: "\u2777",
    142: "\u2778",
    143: "\u2779",
    144: "\u277a",
    145: "\u277b",
    146: "\u277c",
    147: "\u277d",
    148: "\u277e",
    149: "\u277f",
    150: "(Bud and leaf north east \u2013 no equivalent)",
    151: "(Bud and leaf north west \u2013 no equivalent)",
    152: "(Bud and leaf south west \u2013 no equivalent)",
    153: "(Bud and leaf south east \u2013 no equivalent)",
    154: "(Bold vine leaf north east \u2013 no equivalent)",
    155: "(Bold vine leaf north west \u2013 no equivalent)",
    156: "(Bold vine leaf south west \u2013 no equivalent)",
    157: "(Bold vine leaf south east \u2013 no equivalent)",
    158: "\u00b7",
    159: "\u2022",
    160: "\u25aa",
    161: "\u25cb",
    162: "\u2b55",
    163: "(Extra bold white circle \u2013 no equivalent)",
    164: "\u25c9",
    165: "\u25ce",
    166: "(Upper right shadowed white circle \u2013 no equivalent)",
    167: "\u25aa",
    168: "\u25fb",
    169: "(Black three pointed star \u2013 no equivalent)",
    170: "\u2726",
    171: "\u2605",
    172: "\u2736",
    173: "\u2734",
    174: "\u2739",
    175: "\u2735",
    176: "(Square register mark \u2013 no equivalent)",
    177: "\u2316",
    178: "\u27e1",
    179: "\u2311",
    180: "(Question mark in white diamond \u2013 no equivalent)",
    181: "\u272a",
    182: "\u2730",
    183: "\U0001f550",
    184: "\U0001f551",
    185: "\U0001f552",
    186: "\U0001f553",
    187: "\U0001f555",
    188: "\U0001f555",
    189: "\U0001f556",
    190: "\U0001f558",
    191: "\U0001f558",
    192: "\U0001f559",
    193: "\U0001f55a",
    194: "\U0001f55b",
    195: "(White arrow pointing downwards then curving leftwards \u2013 no equivalent)",
    196: "(White arrow pointing downwards then curving rightwards \u2013 no equivalent)",
    197: "(White arrow pointing upwards then curving leftwards \u2013 no equivalent)",
    198: "(White arrow pointing upwards then curving rightwards \u2013 no equivalent)",
    199: "(White arrow pointing leftwards then curving upwards \u2013 no equivalent)",
    200: "(White arrow pointing rightwards then curving upwards \u2013 no equivalent)",
    201: "(White arrow pointing leftwards then curving downwards \u2013 no equivalent)",
    202: "(White arrow pointing rightwards then curving downwards \u2013 no equivalent)",
    203: "(Quilt square 2 \u2013 no equivalent)",
    204: "(Black quilt square 2 \u2013 no equivalent)",
    205: "(Leaf counterclockwise south west \u2013 no equivalent)",
    206: "(Leaf counterclockwise north west \u2013 no equivalent)",
    207: "(Leaf counterclockwise south east \u2013 no equivalent)",
    208: "(Leaf counterclockwise north east \u2013 no equivalent)",
    209: "(Leaf north west \u2013 no equivalent)",
    210: "(Leaf south west \u2013 no equivalent)",
    211: "(Leaf north east \u2013 no equivalent)",
    212: "(Leaf south east \u2013 no equivalent)",
    213: "\u232b",
    214: "\u2326",
    215: "(Three-D top-lighted leftwards arrowhead \u2013 no equivalent)",
    216: "\u27a2",
    217: "(Three-D right-lighted upwards arrowhead \u2013 no equivalent)",
    218: "(Three-D left-lighted downwards arrowhead \u2013 no equivalent)",
    219: "(Circled heavy white leftwards arrow \u2013 no equivalent)",
    220: "\u27b2",
    221: "(Circled heavy white upwards arrow \u2013 no equivalent)",
    222: "(Circled heavy white downwards arrow \u2013 no equivalent)",
    223: "\u21e6",
    224: "\u21e8",
    225: "\u21e7",
    226: "\u21e9",
    227: "(Wide-headed north west arrow \u2013 no equivalent)",
    228: "(Wide-headed north east arrow \u2013 no equivalent)",
    229: "(Wide-headed south west arrow \u2013 no equivalent)",
    230: "(Wide-headed south east arrow \u2013 no equivalent)",
    231: "\u2b05",
    232: "\u2794",
    233: "\u2b06",
    234: "\u2b07",
    235: "(Heavy wide-headed north west arrow \u2013 no equivalent)",
    236: "(Heavy wide-headed north east arrow \u2013 no equivalent)",
    237: "(Heavy wide-headed south west arrow \u2013 no equivalent)",
    238: "(Heavy wide-headed south east arrow \u2013 no equivalent)",
    239: "\u21e6",
    240: "\u21e8",
    241: "\u21e7",
    242: "\u21e9",
    243: "\u2b04",
    244: "\u21f3",
    245: "\u2b00",
    246: "\u2b01",
    247: "\u2b03",
    248: "\u2b02",
    249: "\u25ad",
    250: "\u25ab",
    251: "\u2717",
    252: "\u2713",
    253: "\u2612",
    254: "\u2611",
    255: "(Windows logo \u2013 no equivalent)",
}

FONT_TABLES: Dict[str, Dict[int, str]] = {
    "Symbol": SYMBOL,
    "Wingdings": WINGDINGS,
}


def translate_symbol(char_hex: Optional[str], font: Optional[str]) -> str:
    """
    Resolve a w:sym (w:char, w:font) pair to text.
    Unknown fonts or codes fall back to the raw hex string, never raise.
    """
    raw = char_hex or ""
    try:
        code = int(raw, 16) - SYM_CHAR_OFFSET
    except ValueError:
        logger.info(f"r > sym: unreadable char code {raw!r} (font={font})")
        return raw
    table = FONT_TABLES.get(font or "")
    if table is not None and code in table:
        return table[code]
    logger.info(f"r > sym: {raw} not mapped (font={font})")
    return raw
