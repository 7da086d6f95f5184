"""
Test Suite for Rails Route Prepare
==================================

Test Structure:
    - test_actions.py / test_scope.py / test_controllers.py / test_registry.py:
      unit tests for the recognizer's collaborators
    - test_route_prepare.py: recognizer tests over hand-built call trees
    - test_ruby_parser.py: tree-sitter reader tests
    - test_rails2_routes.py / test_rails3_routes.py: end-to-end routing files
    - test_runner.py / test_config.py / test_cli.py: run orchestration
"""
