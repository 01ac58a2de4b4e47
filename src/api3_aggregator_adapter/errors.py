"""Exception types raised by the adapter and the deployment tooling."""


class AdapterError(Exception):
    """Base class for all errors raised by this package."""


class ProxyAddressIsZeroError(AdapterError, ValueError):
    """Raised when an adapter is constructed around the zero address."""

    def __init__(self) -> None:
        super().__init__("Api3 proxy address is zero")


class RoundIdIsNotCurrentError(AdapterError):
    """Raised when a round ID other than the current block number is queried.

    The adapter has no history, so the caller can only recover by retrying
    with the current block number.

    Attributes:
        round_id: The round ID that was requested
        block_number: The block number the request was checked against
    """

    def __init__(self, round_id: int, block_number: int) -> None:
        self.round_id = round_id
        self.block_number = block_number
        super().__init__(
            f"Round ID {round_id} is not current (current block number is {block_number})"
        )


class BlockNumberNotCastableError(AdapterError, OverflowError):
    """Raised when the block number does not fit in a uint80 round ID."""

    def __init__(self, block_number: int) -> None:
        self.block_number = block_number
        super().__init__(f"Block number {block_number} is not castable to uint80")


class FactoryNotDeployedError(AdapterError):
    """Raised when the CREATE2 factory has no code on the connected chain."""

    def __init__(self, factory_address: str, network: str) -> None:
        self.factory_address = factory_address
        self.network = network
        super().__init__(f"CREATE2 factory {factory_address} is not deployed on {network}")


class DeploymentFailedError(AdapterError):
    """Raised when a deployment transaction did not leave code at the predicted address."""


class ArtifactNotFoundError(AdapterError, FileNotFoundError):
    """Raised when the compiled contract artifact holding the creation bytecode is missing."""

    def __init__(self, contract_name: str, path: str) -> None:
        self.contract_name = contract_name
        self.path = path
        super().__init__(
            f"Artifact of {contract_name} not found at {path}; "
            f"set ARTIFACT_PATH to its compiled Hardhat artifact"
        )
