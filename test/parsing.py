"""
Parsing module behavioral tests (state machine, help short-circuit, invoke).

Scope
- Validate long-form and short-form key-value handling, keys and lists.
- Validate every parse fault and the dash cross-checks in both directions.
- Validate that help flags win over any other input.
- Validate diagnostics on/off and the invoke() prompt normalization.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Parser, invoke, OptionSpec, ProgramMetadata).
"""

from __future__ import annotations

import contextlib
import io
import sys
import unittest
from unittest import TestCase, mock

from argsmith import OptionSpec, ProgramMetadata, Usage, Parser, HelpRequested, Results, invoke
from argsmith import (
    FaultCode,
    ParseError,
    KeyExpectedError,
    UnknownKeyError,
    SingleDashLongKeyError,
    DoubleDashShortKeyError,
    RepeatedArgumentError,
    KeyAssignmentError,
    MissingInlineValueError,
    ShortAssignmentError,
    KeyedListError,
    MalformedValueError,
    PendingValueError,
    MissingValueError,
    HELP_HINT,
)


METADATA = ProgramMetadata("ColColorize", name="Set Console Colours")

BACKGROUND = OptionSpec(short_key="b", long_key="Set-Background", usage=Usage.KEY_VALUE, repeatable=True)
TEXT = OptionSpec(short_key="t", long_key="Set-Text", usage=Usage.KEY_VALUE)
RESET = OptionSpec(short_key="r", long_key="Use-Defaults", usage=Usage.KEY, exclusive=True)
SAMPLE = OptionSpec(short_key="s", long_key="sample", usage=Usage.KEY)
FILES = OptionSpec(usage=Usage.LIST)


def parser(*, listing=False, diagnostics=True):
    options = [BACKGROUND, TEXT, RESET, SAMPLE]
    if listing:
        options.append(FILES)
    return Parser(METADATA, options, diagnostics=diagnostics)


class TestKeyValues(TestCase):
    """Behavioral tests for key-value options."""

    def testLongFormInlineValue(self):
        results = parser().parse(["--Set-Text=Hi"])
        self.assertEqual(results[TEXT].value, "Hi")

    def testLongFormEmptyValue(self):
        results = parser().parse(["--Set-Text="])
        self.assertEqual(results[TEXT].values, ("",))

    def testLongFormSplitsOnFirstEquals(self):
        results = parser().parse(["--Set-Text=a=b"])
        self.assertEqual(results[TEXT].value, "a=b")

    def testShortFormNextToken(self):
        results = parser().parse(["-t", "Black"])
        self.assertEqual(results[TEXT].value, "Black")

    def testValuesAreKeptVerbatim(self):
        results = parser().parse(["-t", "  (0, 0, 0)  ", "--Set-Background= spaced "])
        self.assertEqual(results[TEXT].value, "  (0, 0, 0)  ")
        self.assertEqual(results[BACKGROUND].value, " spaced ")

    def testRepeatableAccumulatesInOrder(self):
        results = parser().parse(["-b", "red", "--Set-Background=green", "-b", "blue"])
        self.assertEqual(results[BACKGROUND].values, ("red", "green", "blue"))
        self.assertEqual(results[BACKGROUND].value, "red")

    def testNonRepeatableRepeatRaises(self):
        with self.assertRaises(RepeatedArgumentError):
            parser().parse(["-t", "Black", "--Set-Text=White"])

    def testSameLongFormTwice(self):
        with self.assertRaises(RepeatedArgumentError):
            parser().parse(["--Set-Text=Hi", "--Set-Text=Yo"])
        text = OptionSpec(short_key="t", long_key="Set-Text", usage=Usage.KEY_VALUE, repeatable=True)
        results = Parser(METADATA, [text]).parse(["--Set-Text=Hi", "--Set-Text=Yo"])
        self.assertEqual(results[text].values, ("Hi", "Yo"))

    def testMixedFormsAccumulateSixValues(self):
        option = OptionSpec(short_key="a", long_key="Aaa", usage=Usage.KEY_VALUE, repeatable=True)
        results = Parser(METADATA, [option]).parse(
            ["--Aaa=Hi", "--Aaa=They", "-a", "Some", "--Aaa=Do", "-a", "ABC", "-a", "def"]
        )
        self.assertEqual(results[option].values, ("Hi", "They", "Some", "Do", "ABC", "def"))
        self.assertEqual(len(results[option]), 6)

    def testLongFormWithoutValueRaises(self):
        with self.assertRaises(MissingInlineValueError):
            parser().parse(["--Set-Text"])

    def testShortFormWithAssignmentRaises(self):
        with self.assertRaises(ShortAssignmentError):
            parser().parse(["-t=Black"])

    def testValueStartingWithDashRaises(self):
        with self.assertRaises(MalformedValueError):
            parser().parse(["-t", "-r"])

    def testKeyWhileValuePendingIsMalformedValue(self):
        with self.assertRaises(MalformedValueError) as context:
            parser().parse(["-t", "--Set-Background=red"])
        self.assertNotIsInstance(context.exception, PendingValueError)
        self.assertIn("--Set-Text", context.exception.message)

    def testInputEndingBeforeValueRaises(self):
        with self.assertRaises(MissingValueError) as context:
            parser().parse(["-r", "-t"])
        self.assertIn("--Set-Text", context.exception.message)


class TestKeys(TestCase):
    """Behavioral tests for key (flag) options."""

    def testShortAndLongForms(self):
        self.assertEqual(parser().parse(["-r"])[RESET].values, ("",))
        self.assertEqual(parser().parse(["--Use-Defaults"])[RESET].values, ("",))

    def testKeyWithValueRaises(self):
        with self.assertRaises(KeyAssignmentError):
            parser().parse(["--Use-Defaults=yes"])
        with self.assertRaises(KeyAssignmentError):
            parser().parse(["--Use-Defaults="])
        with self.assertRaises(KeyAssignmentError):
            parser().parse(["-r=yes"])

    def testRepeatedKeyRaises(self):
        with self.assertRaises(RepeatedArgumentError):
            parser().parse(["-r", "--Use-Defaults"])

    def testEmptyInputNeverRaises(self):
        results = parser().parse([])
        self.assertIsInstance(results, Results)
        self.assertEqual(len(results), 0)
        results = parser(listing=True).parse([])
        self.assertEqual(len(results), 0)
        self.assertNotIn(FILES, results)


class TestKeyResolution(TestCase):
    """Behavioral tests for unknown keys and the dash cross-checks."""

    def testUnknownKeyRaises(self):
        with self.assertRaises(UnknownKeyError) as context:
            parser().parse(["--Set-Colour=red"])
        self.assertEqual(context.exception.code, FaultCode.UNKNOWN_KEY)
        self.assertIn("first position", context.exception.message)

    def testBareDashesAreUnknown(self):
        with self.assertRaises(UnknownKeyError):
            parser().parse(["--"])
        with self.assertRaises(UnknownKeyError):
            parser().parse(["-"])

    def testSingleDashLongKeyRaises(self):
        with self.assertRaises(SingleDashLongKeyError):
            parser().parse(["-Set-Text=Hi"])
        with self.assertRaises(SingleDashLongKeyError):
            parser().parse(["-Use-Defaults"])

    def testDoubleDashShortKeyRaises(self):
        with self.assertRaises(DoubleDashShortKeyError):
            parser().parse(["--b"])
        with self.assertRaises(DoubleDashShortKeyError):
            parser().parse(["--r"])

    def testLongKeyStartingWithShortKeyLetterRaises(self):
        with self.assertRaises(DoubleDashShortKeyError):
            parser().parse(["--sample"])
        background = OptionSpec(short_key="b", long_key="background", usage=Usage.KEY)
        with self.assertRaises(DoubleDashShortKeyError) as context:
            Parser(METADATA, [background]).parse(["--background"])
        self.assertIn("'b'", context.exception.message)
        self.assertTrue(parser().parse(["-s"]).is_passed(SAMPLE))

    def testFirstLetterComparisonIsCaseSensitive(self):
        option = OptionSpec(short_key="a", long_key="Aaa", usage=Usage.KEY)
        results = Parser(METADATA, [option]).parse(["--Aaa"])
        self.assertEqual(results[option].values, ("",))

    def testKeyExpectedWithoutList(self):
        with self.assertRaises(KeyExpectedError) as context:
            parser().parse(["-t", "Black", "White"])
        self.assertIn("third position", context.exception.message)

    def testKeyedListRaises(self):
        keyed = OptionSpec(short_key="l", long_key="files", usage=Usage.LIST)
        with self.assertRaises(KeyedListError):
            Parser(METADATA, [keyed]).parse(["--files"])


class TestList(TestCase):
    """Behavioral tests for the trailing positional list."""

    def testListCollectsTrailingValues(self):
        results = parser(listing=True).parse(["-r", "a.json", "b.json"])
        self.assertEqual(results[FILES].values, ("a.json", "b.json"))
        self.assertTrue(results.is_passed(RESET))

    def testListSwallowsDashedTokens(self):
        results = parser(listing=True).parse(["a.json", "-t", "--Set-Text=Hi", "--unknown"])
        self.assertEqual(results[FILES].values, ("a.json", "-t", "--Set-Text=Hi", "--unknown"))
        self.assertNotIn(TEXT, results)

    def testListAfterShortValue(self):
        results = parser(listing=True).parse(["-t", "Black", "a.json"])
        self.assertEqual(results[TEXT].value, "Black")
        self.assertEqual(results[FILES].value, "a.json")

    def testResultsListsArgumentsInArrivalOrder(self):
        results = parser(listing=True).parse(["-t", "Black", "-r", "a.json"])
        self.assertEqual([received.option for received in results], [TEXT, RESET, FILES])


class TestHelp(TestCase):
    """Behavioral tests for the help short-circuit."""

    def testHelpFlagsReturnHelp(self):
        p = parser()
        for flag in ("-h", "--help", "--Help"):
            outcome = p.parse([flag])
            self.assertIsInstance(outcome, HelpRequested)
            self.assertEqual(outcome.text, p.help)
            self.assertEqual(str(outcome), p.help)

    def testHelpWinsOverMalformedInput(self):
        outcome = parser().parse(["--Set-Colour", "-Set-Text=Hi", "stray", "--help"])
        self.assertIsInstance(outcome, HelpRequested)

    def testHelpWinsInsideList(self):
        outcome = parser(listing=True).parse(["a.json", "-h"])
        self.assertIsInstance(outcome, HelpRequested)

    def testHelpAsValueStillWins(self):
        outcome = parser().parse(["-t", "-h"])
        self.assertIsInstance(outcome, HelpRequested)


class TestDiagnostics(TestCase):
    """Behavioral tests for detail capture."""

    def testDetailsOnByDefault(self):
        p = parser()
        self.assertTrue(p.diagnostics)
        with self.assertRaises(MalformedValueError) as context:
            p.parse(["-r", "-t", "--Set-Text=Hi"])
        fault = context.exception
        details = dict(fault.details)
        self.assertEqual(details["Malformed value"], "--Set-Text=Hi")
        self.assertEqual(details["Last argument"].option, RESET)
        self.assertEqual(fault.options["command"], "ColColorize")
        self.assertIn("third position", fault.message)

    def testDetailsOff(self):
        p = parser(diagnostics=False)
        with self.assertRaises(MalformedValueError) as context:
            p.parse(["-t", "-r"])
        fault = context.exception
        self.assertEqual(fault.details, ())
        self.assertTrue(fault.__suppress_context__)
        self.assertIn("second position", fault.message)
        self.assertTrue(str(fault).endswith(HELP_HINT))

    def testDiagnosticsSetter(self):
        p = parser()
        p.diagnostics = False
        with self.assertRaises(UnknownKeyError) as context:
            p.parse(["--nope"])
        self.assertEqual(context.exception.details, ())
        with self.assertRaises(TypeError):
            p.diagnostics = "yes"

    def testParseErrorTextEndsWithHint(self):
        with self.assertRaises(ParseError) as context:
            parser().parse(["--Set-Text"])
        text = str(context.exception)
        self.assertTrue(text.startswith(context.exception.message))
        self.assertTrue(text.endswith("Use -h, --help or --Help for help."))


class TestReuse(TestCase):
    """A parser can run several parses; each returns fresh results."""

    def testSequentialParsesAreIndependent(self):
        p = parser(listing=True)
        first = p.parse(["-t", "Black", "a.json"])
        second = p.parse(["-t", "White"])
        self.assertEqual(first[TEXT].value, "Black")
        self.assertEqual(first[FILES].values, ("a.json",))
        self.assertEqual(second[TEXT].value, "White")
        self.assertNotIn(FILES, second)

    def testParserRecoversAfterFault(self):
        p = parser()
        with self.assertRaises(MissingValueError):
            p.parse(["-t"])
        self.assertEqual(p.parse(["-t", "Black"])[TEXT].value, "Black")

    def testTokensMustBeStrings(self):
        with self.assertRaises(TypeError):
            parser().parse("-t Black")
        with self.assertRaises(TypeError):
            parser().parse(["-t", 1])


class TestInvoke(TestCase):
    """Behavioral tests for invoke()."""

    def testStringPromptIsShellSplit(self):
        results = invoke(parser(), '-t "Dark Blue" --Set-Background=red')
        self.assertEqual(results[TEXT].value, "Dark Blue")
        self.assertEqual(results[BACKGROUND].value, "red")

    def testIterablePrompt(self):
        results = invoke(parser(), iter(["-t", " Black "]))
        self.assertEqual(results[TEXT].value, " Black ")

    def testDefaultPromptReadsArgv(self):
        with mock.patch.object(sys, "argv", ["ColColorize", "--Use-Defaults"]):
            results = invoke(parser())
        self.assertTrue(results.is_passed(RESET))

    def testInvalidPromptRaises(self):
        with self.assertRaises(TypeError):
            invoke(parser(), 42)
        with self.assertRaises(TypeError):
            invoke(parser(), ["-t", None])

    def testHelpPrintsAndExits(self):
        p = parser()
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            with self.assertRaises(SystemExit) as context:
                invoke(p, "-h")
        self.assertEqual(context.exception.code, 0)
        self.assertIn("Set Console Colours", stdout.getvalue())
        self.assertIn("  -h, --help, --Help", stdout.getvalue())

    def testParseErrorPropagates(self):
        with self.assertRaises(UnknownKeyError):
            invoke(parser(), "--nope")


if __name__ == "__main__":
    unittest.main()
