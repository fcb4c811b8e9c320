#!/usr/bin/env python3
"""
Random fuzzer for the svgscrub sanitizer.
Generates hostile SVG documents and checks that sanitized output only holds
allow-listed content, keeps references local and is stable when sanitized again.
"""

import argparse
import random
import string
import sys
import time
import traceback

from svgscrub import DEFAULT_POLICY, MarkupParseError, parse, sanitize_markup
from svgscrub.namespaces import NS
from svgscrub.node import Element, Text
from svgscrub.references import get_href, is_local_reference, iter_url_targets
from svgscrub.sanitize import trim_whitespace

ALLOWED_TAGS = sorted(DEFAULT_POLICY.allow_list.tags)

HOSTILE_TAGS = [
    "script", "foreignObject", "iframe", "object", "embed", "html", "body", "div",
    "animate", "set", "handler", "listener", "font-face", "style", "image2", "x",
]

ATTRIBUTES = [
    "id", "class", "style", "fill", "stroke", "filter", "mask", "clip-path",
    "marker-start", "marker-mid", "marker-end", "transform", "gradientTransform",
    "patternTransform", "opacity", "width", "height", "x", "y", "d", "points",
    "onclick", "onload", "onmouseover", "data-x", "data-name", "se:nonce", "se:connector",
    "xlink:href", "xlink:title", "xml:space", "href", "formula", "requiredFeatures",
]

VALUES = [
    "", " ", "red", "none", "#a", "#", "url(#a)", "url( '#a' )", 'url("#grad")',
    "url(http://evil.example/x.svg#a)", "URL(javascript:alert(1))", "url()",
    "red url(#a) url(data:image/png;base64,AAAA)", "javascript:alert(1)",
    "http://evil.example/", "translate(5-3) rotate(10-20)", "scale(1e-3)",
    "fill:red;stroke:url(http://evil.example)", "fill: blue ; onclick : x",
    "style:fill:red", ":", ";;", "xlink:href:x", "1", "0.5", "M0 0L10-10",
]

TEXTS = ["", " ", "\n\t", "hello", "  padded  ", "a < b", "a & b", " ", "​"]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def escape(value):
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def fuzz_tag_name():
    strategies = [
        lambda: random.choice(ALLOWED_TAGS),
        lambda: random.choice(ALLOWED_TAGS),
        lambda: random.choice(HOSTILE_TAGS),
        lambda: random.choice(ALLOWED_TAGS).upper(),
        lambda: "svg:" + random.choice(ALLOWED_TAGS),
        lambda: "x" + random_string(0, 8).lower(),
    ]
    return random.choice(strategies)()


def fuzz_attributes():
    attrs = {}
    for _ in range(random.randint(0, 6)):
        name = random.choice(ATTRIBUTES) if random.random() < 0.9 else "on" + random_string(2, 8)
        attrs[name] = random.choice(VALUES)
    return "".join(f' {name}="{escape(value)}"' for name, value in attrs.items())


def fuzz_text():
    return escape(random.choice(TEXTS))


def fuzz_element(depth):
    tag = fuzz_tag_name()
    if depth <= 0 or random.random() < 0.3:
        return f"<{tag}{fuzz_attributes()}/>"
    children = []
    for _ in range(random.randint(0, 4)):
        kind = random.random()
        if kind < 0.6:
            children.append(fuzz_element(depth - 1))
        elif kind < 0.85:
            children.append(fuzz_text())
        elif kind < 0.95:
            children.append(f"<!--{random_string(0, 10)}-->")
        else:
            children.append(f"<![CDATA[{random_string(0, 10)}]]>")
    return f"<{tag}{fuzz_attributes()}>{''.join(children)}</{tag}>"


def generate_fuzzed_svg():
    """Generate a complete fuzzed SVG document."""
    body = "".join(fuzz_element(random.randint(0, 6)) for _ in range(random.randint(1, 5)))
    return (
        f'<svg xmlns="{NS.SVG}" xmlns:xlink="{NS.XLINK}" xmlns:se="{NS.SE}" xmlns:svg="{NS.SVG}"'
        f' xmlns:evil="http://evil.example/ns"{fuzz_attributes()}>{body}</svg>'
    )


def check_invariants(output):
    """Return a list of violations found in sanitized `output`."""
    problems = []
    allow_list = DEFAULT_POLICY.allow_list
    root = parse(output).document_element
    for node in root.iter():
        if isinstance(node, Text):
            if not node.data or node.data != trim_whitespace(node.data):
                problems.append(f"untrimmed text {node.data!r}")
            continue
        if not isinstance(node, Element):
            continue
        allowed_ns = allow_list.lookup_ns(node.name)
        if allowed_ns is None:
            problems.append(f"unsupported element <{node.name}>")
            continue
        for attr in node.attributes:
            if attr.namespace == NS.XMLNS:
                if attr.value not in DEFAULT_POLICY.registry:
                    problems.append(f"unknown namespace declaration {attr.value!r}")
            elif attr.namespace == NS.SE:
                continue
            elif allowed_ns.get(attr.local_name, "missing") != attr.namespace:
                problems.append(f"attribute {attr.name!r} on <{node.name}>")
            elif attr.local_name == "style":
                problems.append(f"style attribute on <{node.name}>")
        if node.name in DEFAULT_POLICY.local_href_tags:
            href = get_href(node)
            if href and not is_local_reference(href):
                problems.append(f"external href {href!r} on <{node.name}>")
        if node.name == "use" and not get_href(node):
            problems.append("<use> without href")
        for attr_name in DEFAULT_POLICY.local_url_attributes:
            value = node.get_attribute_ns(None, attr_name)
            if any(not is_local_reference(target) for target in iter_url_targets(value)):
                problems.append(f"external url in {attr_name!r} on <{node.name}>")
    if sanitize_markup(output) != output:
        problems.append("output changes when sanitized again")
    return problems


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer against the sanitizer."""
    if seed is not None:
        random.seed(seed)

    crashes = []
    violations = []
    hangs = []
    successes = 0

    print(f"Fuzzing svgscrub with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        svg = generate_fuzzed_svg()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            output = sanitize_markup(svg)
            elapsed = time.perf_counter() - start

            problems = check_invariants(output)
            if problems:
                violations.append({"test_num": i, "svg": svg, "output": output, "problems": problems})
                if verbose:
                    print(f"  VIOLATION: Test {i}: {problems[0]}")
            elif elapsed > 5.0:
                hangs.append({"test_num": i, "svg": svg, "time": elapsed})
                if verbose:
                    print(f"  HANG: Test {i} took {elapsed:.2f}s")
            else:
                successes += 1

        except MarkupParseError as e:
            # The generator only emits well-formed XML.
            crashes.append({"test_num": i, "svg": svg, "error": f"parse error: {e}", "traceback": ""})
        except Exception as e:
            crashes.append({
                "test_num": i,
                "svg": svg,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")

    elapsed_total = time.time() - start_time

    print(f"\n{'='*60}")
    print("FUZZING RESULTS: svgscrub")
    print(f"{'='*60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Violations:     {len(violations)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests/elapsed_total:.1f}")

    if crashes:
        print(f"\n{'='*60}")
        print("CRASH DETAILS:")
        print(f"{'='*60}")
        for crash in crashes[:10]:
            print(f"\nTest #{crash['test_num']}:")
            print(f"  SVG: {crash['svg'][:200]!r}...")
            print(f"  Error: {crash['error']}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if violations:
        print(f"\n{'='*60}")
        print("VIOLATION DETAILS:")
        print(f"{'='*60}")
        for violation in violations[:10]:
            print(f"\nTest #{violation['test_num']}:")
            print(f"  SVG:    {violation['svg'][:200]!r}...")
            print(f"  Output: {violation['output'][:200]!r}...")
            for problem in violation["problems"]:
                print(f"  - {problem}")

    if save_failures and (crashes or violations or hangs):
        filename = f"fuzz_failures_svgscrub_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write("Fuzzing results for svgscrub\n")
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"SVG:\n{crash['svg']}\n")
                f.write(f"Error: {crash['error']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for violation in violations:
                f.write(f"=== VIOLATION #{violation['test_num']} ===\n")
                f.write(f"SVG:\n{violation['svg']}\n")
                f.write(f"Output:\n{violation['output']}\n")
                f.write("".join(f"- {problem}\n" for problem in violation["problems"]))
                f.write("\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"SVG:\n{hang['svg']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not crashes and not violations and not hangs


def main():
    parser = argparse.ArgumentParser(description="Fuzz the svgscrub sanitizer with hostile SVG")
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed SVG documents (no sanitizing)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i+1} ===")
            print(generate_fuzzed_svg())
            print()
        return

    success = run_fuzzer(
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
