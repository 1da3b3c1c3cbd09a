"""
BiomeCraft Test Suite

Test structure:
- unit/: Test components in isolation with mocks
- integration/: Test the CLI and full pipeline without a real LLM
- mocks/: Mock implementations for testing
"""
