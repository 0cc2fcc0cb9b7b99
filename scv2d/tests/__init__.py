'''
SCV Decomposition Test Suite

Test Modules:
-------------
- test_moments.py: weighted mean, variance, correlation, SCV primitives
- test_preparation.py: role resolution, cleaning, weight validation, group discovery
- test_decomposition.py: decomposition values and algebraic properties
- test_api.py: POST /decompositions contract and error mapping
- test_config.py: settings defaults and environment overrides

Running Tests:
--------------
    pip install -e ".[test]"
    pytest scv2d/tests/ -v

Configuration:
--------------
See conftest.py for shared fixtures and test configuration.
'''

__all__ = []
