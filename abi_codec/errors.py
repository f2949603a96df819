class AbiCodecError(ValueError):
    """Raised when a signature, argument list or calldata is not valid ABI."""
