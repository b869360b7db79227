from rich.pretty import pprint

from argsmith import *


parser = Parser(
    ProgramMetadata(
        "ColColorize",
        name="Set Console Colours",
        description="This program set the colours used by this console.",
        author="Max Whitehouse",
        version="1.0.0",
    ),
    {
        "background": OptionSpec(
            short_key="b",
            long_key="Set-Background",
            usage=Usage.KEY_VALUE,
            repeatable=True,
            description="This command sets the background colour of the console using an RGB 0-255 triplet.",
            short_example="(0,0,0)",
            long_example="(0,0,0)",
        ),
        "text": OptionSpec(
            short_key="t",
            long_key="Set-Text",
            usage=Usage.KEY_VALUE,
            description="This command sets the text colour if the console using an RGB 0-255 triplet.",
        ),
        "defaults": OptionSpec(
            long_key="Use-Defaults",
            usage=Usage.KEY,
            exclusive=True,
            description="This command tells the console revert to its default colour scheme. "
                        "This should be used on its own.",
        ),
        "files": OptionSpec(
            usage=Usage.LIST,
            description='This will take the path to json files and read a "Set Console Colours" configuration file.',
        ),
    },
)


if __name__ == '__main__':
    pprint(list(invoke(parser)))
