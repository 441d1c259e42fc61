"""
Basic Risma Example

Demonstrates variables, chains, direct calls, nesting and escaping.
"""

import sys
sys.path.insert(0, '..')

import risma


# Register a custom function
@risma.register("prefix")
def prefix(value, text):
    return f"{text}{value}"


# Expose static methods of a class
class Markdown:
    @staticmethod
    def bold(value):
        return f"**{value}**"


risma.add_class(Markdown)


def main():
    print("=== Risma Basic Example ===\n")

    variables = {
        "name": "NABEGHE",
        "title": "hello world",
        "amount": 1500.5,
        "old": "foo",
        "new": "bar",
        "text": "hello foo world",
    }

    examples = [
        ("Variable", "Hello {name}!"),
        ("Chain", "{name.strtolower.ucfirst}"),
        ("Placeholder argument", '{title.str_replace(" ", "-", $)}'),
        ("Custom function", '{name.ucfirst.prefix("Mr. ")}'),
        ("Class method", "{title.bold}"),
        ("Number format", "{amount.number_format(2)}"),
        ("Direct call", '{@date("Y-m-d")}'),
        ("Nested", '{@str_replace("{old}", "{new}", "{text}")}'),
        ("Escaped", "Literal !{name}"),
        ("Missing", "[{missing}]"),
    ]

    for i, (label, template) in enumerate(examples, 1):
        print(f"{i}. {label}: {template}")
        print(f"   Result: {risma.render(template, variables)}\n")

    print("Strict mode:")
    try:
        risma.render("{missing}", variables, default=False)
    except risma.UndefinedVariable as exc:
        print(f"   Error: {exc}")


if __name__ == "__main__":
    main()
