import math

import pytest

from flowengine.goformat import format_float, parse_bool, parse_float, parse_int

INPUTS = [
    123, 12300, 0.000123, 1.0 / 8.0, 2.0 / 3.0,
    math.inf, -math.inf, math.nan, 0.0, -0.0,
]

RESULTS = {
    "b": {
        0: ["8655355533852672p-46", "6761996510822400p-39", "4537899042132550p-65",
            "4503599627370496p-55", "6004799503160661p-53", "+Inf", "-Inf", "NaN",
            "0p-1074", "-0p-1074"],
    },
    "e": {
        0: ["1e+02", "1e+04", "1e-04", "1e-01", "7e-01", "+Inf", "-Inf", "NaN", "0e+00", "-0e+00"],
        1: ["1.2e+02", "1.2e+04", "1.2e-04", "1.2e-01", "6.7e-01", "+Inf", "-Inf",
            "NaN", "0.0e+00", "-0.0e+00"],
        -1: ["1.23e+02", "1.23e+04", "1.23e-04", "1.25e-01", "6.666666666666666e-01",
             "+Inf", "-Inf", "NaN", "0e+00", "-0e+00"],
        15: ["1.230000000000000e+02", "1.230000000000000e+04", "1.230000000000000e-04",
             "1.250000000000000e-01", "6.666666666666666e-01", "+Inf", "-Inf", "NaN",
             "0.000000000000000e+00", "-0.000000000000000e+00"],
    },
    "E": {
        0: ["1E+02", "1E+04", "1E-04", "1E-01", "7E-01", "+Inf", "-Inf", "NaN", "0E+00", "-0E+00"],
        1: ["1.2E+02", "1.2E+04", "1.2E-04", "1.2E-01", "6.7E-01", "+Inf", "-Inf",
            "NaN", "0.0E+00", "-0.0E+00"],
        -1: ["1.23E+02", "1.23E+04", "1.23E-04", "1.25E-01", "6.666666666666666E-01",
             "+Inf", "-Inf", "NaN", "0E+00", "-0E+00"],
        15: ["1.230000000000000E+02", "1.230000000000000E+04", "1.230000000000000E-04",
             "1.250000000000000E-01", "6.666666666666666E-01", "+Inf", "-Inf", "NaN",
             "0.000000000000000E+00", "-0.000000000000000E+00"],
    },
    "f": {
        0: ["123", "12300", "0", "0", "1", "+Inf", "-Inf", "NaN", "0", "-0"],
        1: ["123.0", "12300.0", "0.0", "0.1", "0.7", "+Inf", "-Inf", "NaN", "0.0", "-0.0"],
        -1: ["123", "12300", "0.000123", "0.125", "0.6666666666666666", "+Inf",
             "-Inf", "NaN", "0", "-0"],
        15: ["123.000000000000000", "12300.000000000000000", "0.000123000000000",
             "0.125000000000000", "0.666666666666667", "+Inf", "-Inf", "NaN",
             "0.000000000000000", "-0.000000000000000"],
    },
    "g": {
        0: ["1e+02", "1e+04", "0.0001", "0.1", "0.7", "+Inf", "-Inf", "NaN", "0", "-0"],
        1: ["1e+02", "1e+04", "0.0001", "0.1", "0.7", "+Inf", "-Inf", "NaN", "0", "-0"],
        -1: ["123", "12300", "0.000123", "0.125", "0.6666666666666666", "+Inf",
             "-Inf", "NaN", "0", "-0"],
        15: ["123", "12300", "0.000123", "0.125", "0.666666666666667", "+Inf",
             "-Inf", "NaN", "0", "-0"],
    },
    "G": {
        0: ["1E+02", "1E+04", "0.0001", "0.1", "0.7", "+Inf", "-Inf", "NaN", "0", "-0"],
        1: ["1E+02", "1E+04", "0.0001", "0.1", "0.7", "+Inf", "-Inf", "NaN", "0", "-0"],
        -1: ["123", "12300", "0.000123", "0.125", "0.6666666666666666", "+Inf",
             "-Inf", "NaN", "0", "-0"],
        15: ["123", "12300", "0.000123", "0.125", "0.666666666666667", "+Inf",
             "-Inf", "NaN", "0", "-0"],
    },
    "x": {
        0: ["0x1p+07", "0x1p+14", "0x1p-13", "0x1p-03", "0x1p-01", "+Inf",
            "-Inf", "NaN", "0x0p+00", "-0x0p+00"],
        1: ["0x1.fp+06", "0x1.8p+13", "0x1.0p-13", "0x1.0p-03", "0x1.5p-01",
            "+Inf", "-Inf", "NaN", "0x0.0p+00", "-0x0.0p+00"],
        -1: ["0x1.ecp+06", "0x1.806p+13", "0x1.01f31f46ed246p-13", "0x1p-03",
             "0x1.5555555555555p-01", "+Inf", "-Inf", "NaN", "0x0p+00", "-0x0p+00"],
        15: ["0x1.ec0000000000000p+06", "0x1.806000000000000p+13",
             "0x1.01f31f46ed24600p-13", "0x1.000000000000000p-03",
             "0x1.555555555555500p-01", "+Inf", "-Inf", "NaN",
             "0x0.000000000000000p+00", "-0x0.000000000000000p+00"],
    },
    "X": {
        0: ["0X1P+07", "0X1P+14", "0X1P-13", "0X1P-03", "0X1P-01", "+Inf",
            "-Inf", "NaN", "0X0P+00", "-0X0P+00"],
        1: ["0X1.FP+06", "0X1.8P+13", "0X1.0P-13", "0X1.0P-03", "0X1.5P-01",
            "+Inf", "-Inf", "NaN", "0X0.0P+00", "-0X0.0P+00"],
        -1: ["0X1.ECP+06", "0X1.806P+13", "0X1.01F31F46ED246P-13", "0X1P-03",
             "0X1.5555555555555P-01", "+Inf", "-Inf", "NaN", "0X0P+00", "-0X0P+00"],
        15: ["0X1.EC0000000000000P+06", "0X1.806000000000000P+13",
             "0X1.01F31F46ED24600P-13", "0X1.000000000000000P-03",
             "0X1.555555555555500P-01", "+Inf", "-Inf", "NaN",
             "0X0.000000000000000P+00", "-0X0.000000000000000P+00"],
    },
}

CASES = [
    (fmt, prec, INPUTS[i], expected)
    for fmt, precisions in RESULTS.items()
    for prec, values in precisions.items()
    for i, expected in enumerate(values)
]


@pytest.mark.parametrize("fmt,prec,value,expected", CASES)
def test_format_float_table(fmt, prec, value, expected):
    assert format_float(value, fmt, prec) == expected


@pytest.mark.parametrize(
    "value,expected",
    [(11.0, "11"), (-11.0, "-11"), (11.1, "11.1"), (-11.1, "-11.1"), (0.0, "0"),
     (-0.0, "-0"), (math.nan, "NaN"), (math.inf, "+Inf"), (-math.inf, "-Inf")],
)
def test_float_to_string_shortest(value, expected):
    assert format_float(value, "f", -1) == expected


def test_format_float_bad_directive():
    with pytest.raises(ValueError):
        format_float(1.0, "q", 1)


@pytest.mark.parametrize("text,expected", [("11", 11), ("-11", -11), ("0", 0), ("-00005", -5)])
def test_parse_int(text, expected):
    assert parse_int(text) == expected


@pytest.mark.parametrize("text", ["zero", "1.0", "", "0b1", "0o1", "0x1", "1_000_000"])
def test_parse_int_invalid(text):
    with pytest.raises(ValueError):
        parse_int(text)


@pytest.mark.parametrize(
    "text,expected",
    [("11.1", 11.1), ("-11.1", -11.1), ("0", 0.0), ("Inf", math.inf), ("+Inf", math.inf),
     ("-Inf", -math.inf), ("5e+5", 500000.0), ("5E-5", 0.00005)],
)
def test_parse_float(text, expected):
    assert parse_float(text) == expected


def test_parse_float_negative_zero():
    result = parse_float("-0")
    assert result == 0.0 and math.copysign(1.0, result) == -1.0


@pytest.mark.parametrize("text", ["", "ten", "5E+500"])
def test_parse_float_invalid(text):
    with pytest.raises(ValueError):
        parse_float(text)


@pytest.mark.parametrize(
    "text,expected",
    [("true", True), ("True", True), ("TRUE", True), ("t", True), ("T", True), ("1", True),
     ("false", False), ("False", False), ("FALSE", False), ("f", False), ("F", False),
     ("0", False)],
)
def test_parse_bool(text, expected):
    assert parse_bool(text) is expected


@pytest.mark.parametrize("text", ["", "abc"])
def test_parse_bool_invalid(text):
    with pytest.raises(ValueError):
        parse_bool(text)