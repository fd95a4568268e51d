from ticketing.artifacts.generator import TicketArtifactGenerator

__all__ = ["TicketArtifactGenerator"]
