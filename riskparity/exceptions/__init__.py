"""Custom exception hierarchy for the risk-parity allocation package."""


class RiskParityError(Exception):
    """Base exception for all package errors."""


class ConfigValidationError(RiskParityError):
    """Raised when configuration parameters are invalid or inconsistent."""


class InsufficientDataError(RiskParityError):
    """Raised when a return window is too short for the requested estimate."""

    def __init__(self, message: str, n_observations: int | None = None, required: int | None = None):
        self.n_observations = n_observations
        self.required = required
        detail = message
        if n_observations is not None:
            detail += f" (observations={n_observations})"
        if required is not None:
            detail += f" (required={required})"
        super().__init__(detail)


class InvalidDimensionError(RiskParityError):
    """Raised when vector and matrix sizes do not agree."""


class MissingDataError(RiskParityError):
    """Raised when a return matrix contains NaN or infinite values."""


class InvalidCovarianceError(RiskParityError):
    """Raised when a matrix is not a finite, symmetric, positive-definite covariance."""

    def __init__(self, message: str, min_eigenvalue: float | None = None):
        self.min_eigenvalue = min_eigenvalue
        detail = message
        if min_eigenvalue is not None:
            detail += f" (min_eigenvalue={min_eigenvalue:.2e})"
        super().__init__(detail)


class SingularCovarianceError(InvalidCovarianceError):
    """Raised when a covariance matrix cannot be inverted for minimum variance."""

    def __init__(self, message: str, condition_number: float | None = None):
        self.condition_number = condition_number
        if condition_number is not None:
            message += f" (condition_number={condition_number:.2e})"
        super().__init__(message)


class DegenerateAssetError(RiskParityError):
    """Raised when an asset has (near-)zero variance and breaks the per-asset quadratic."""

    def __init__(self, message: str, asset_index: int | None = None):
        self.asset_index = asset_index
        detail = message
        if asset_index is not None:
            detail += f" (asset_index={asset_index})"
        super().__init__(detail)


class InvalidBudgetError(RiskParityError):
    """Raised when a risk budget has the wrong length, negative entries, or does not sum to 1."""


class SolverConvergenceError(RiskParityError):
    """Raised when an unconverged risk-parity solution is rejected by the caller."""

    def __init__(self, message: str, iterations: int | None = None, final_residual: float | None = None):
        self.iterations = iterations
        self.final_residual = final_residual
        detail = message
        if iterations is not None:
            detail += f" (iterations={iterations})"
        if final_residual is not None:
            detail += f" (residual={final_residual:.2e})"
        super().__init__(detail)
