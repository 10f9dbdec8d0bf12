"""
One demo per AWS service. Each module exposes ``run_all`` and can be run
directly with ``python -m demos.<name>``.
"""
