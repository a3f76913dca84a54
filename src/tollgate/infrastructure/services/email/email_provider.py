"""Transport interface for outgoing account emails."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OutgoingEmail:
    """A fully rendered message ready for a transport.

    Attributes:
        to: Recipient address.
        subject: Subject line.
        html_body: HTML alternative.
        text_body: Plain text alternative.
        from_email: Sender address.
        from_name: Sender display name.
    """

    to: str
    subject: str
    html_body: str
    text_body: str
    from_email: str
    from_name: str

    @property
    def sender(self) -> str:
        return f"{self.from_name} <{self.from_email}>" if self.from_name else self.from_email


class EmailProvider(ABC):
    """A way of delivering OutgoingEmail messages."""

    @abstractmethod
    async def send_email(self, message: OutgoingEmail) -> bool:
        """Deliver one message.

        Returns:
            False when the transport declined the message without an error.
            Transport failures propagate as exceptions.
        """
        ...
