"""Test suite for dotschema.

This package contains tests for:
- Property rule builders and evaluation order
- Schema compilation (nested literals, arrays, mounted schemas)
- Validation, stripping and typecasting
- Built-in validators, typecasters and the dot-path accessor
- JSON Schema import
"""
