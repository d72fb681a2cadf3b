"""
Test that critline can be imported and exposes its public API.
"""

import pytest


def test_import_critline():
    """Verify critline package can be imported."""
    import critline
    assert hasattr(critline, "__version__")


def test_version_format():
    """Verify version string is properly formatted."""
    import critline
    parts = critline.__version__.split(".")
    assert len(parts) >= 2
    assert all(p.isdigit() or "-" in p for p in parts)


def test_import_models():
    from critline import MvoModel, SimplexModel
    assert MvoModel is not None
    assert SimplexModel is not None


def test_import_functional_api():
    from critline import efficient_frontier, solve_lp
    assert callable(efficient_frontier)
    assert callable(solve_lp)


def test_import_mvo_core():
    from critline.mvo import (
        ActiveSet,
        CriticalLineEngine,
        ProblemData,
        SimplexSolver,
        SolverState,
    )
    assert all(cls is not None for cls in (
        ActiveSet, CriticalLineEngine, ProblemData, SimplexSolver, SolverState,
    ))


def test_epsilon_is_shared():
    from critline.mvo import EPSILON
    from critline.mvo.optimizer import EPSILON as optimizer_epsilon
    assert EPSILON == optimizer_epsilon == 1e-8


def test_import_exceptions():
    """Verify exception classes can be imported."""
    from critline import (
        CritlineError,
        DegenerateError,
        InfeasibleError,
        NumericalError,
        SolverError,
        UnboundedError,
    )

    assert issubclass(SolverError, CritlineError)
    assert issubclass(InfeasibleError, SolverError)
    assert issubclass(UnboundedError, SolverError)
    assert issubclass(DegenerateError, SolverError)
    assert issubclass(NumericalError, CritlineError)


def test_info_function():
    """Verify info() function works."""
    import critline
    info = critline.info()

    assert isinstance(info, str)
    assert "critline version" in info
    assert "Python version" in info
