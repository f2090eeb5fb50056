#!/usr/bin/env python3
"""
Test runner for SVG Palette Pro.

Runs the unit suites (normalizer, extractor, replacer, metadata, generator,
store, session) and the CLI integration suite.
"""

import argparse
import logging
import os
import sys
import unittest

# Add the project root directory to the Python path
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

SUITES = ('unit', 'integration')


def create_test_suite(module_name=None):
    """Discover all tests, or only those of one suite directory."""
    loader = unittest.TestLoader()
    start_dir = os.path.join(project_root, 'tests')
    if module_name:
        start_dir = os.path.join(start_dir, module_name)
    return loader.discover(start_dir, pattern='test_*.py', top_level_dir=project_root)


def run_tests(module_name=None, verbosity=1):
    """Run the selected tests and return True if they all passed."""
    suite = create_test_suite(module_name)

    runner = unittest.TextTestRunner(
        verbosity=verbosity,
        stream=sys.stdout,
        buffer=True  # Capture stdout/stderr during tests
    )
    result = runner.run(suite)
    return result.wasSuccessful()


def main():
    """Main function to run the test suite."""
    parser = argparse.ArgumentParser(description='Run tests for SVG Palette Pro')
    parser.add_argument(
        '--module',
        '-m',
        choices=SUITES,
        help='Run tests from a specific suite (unit or integration)'
    )
    parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Run tests with verbose output'
    )
    args = parser.parse_args()

    # library warnings about deliberately malformed fixtures are noise here
    logging.basicConfig(level=logging.ERROR if not args.verbose else logging.DEBUG)

    print("SVG Palette Pro - Test Runner")
    print("=" * 40)

    success = run_tests(args.module, verbosity=2 if args.verbose or args.module else 1)

    print("\n" + "=" * 40)
    if success:
        print("All tests passed!")
        sys.exit(0)
    else:
        print("Some tests failed!")
        sys.exit(1)


if __name__ == '__main__':
    main()
