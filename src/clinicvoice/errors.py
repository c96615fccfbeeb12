class CollaboratorError(Exception):
    """An external service call failed; the caller picks the degradation."""


class GenerationError(CollaboratorError):
    pass


class SynthesisError(CollaboratorError):
    pass


class PublishError(CollaboratorError):
    pass
