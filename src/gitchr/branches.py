"""Card branch naming."""

from pydantic import BaseModel, ConfigDict

from gitchr.errors import BranchNameError
from gitchr.models import Settings


class CardBranches(BaseModel):
    """Production and homologation branches of one card."""

    model_config = ConfigDict(frozen=True)

    card_number: str
    prd: str
    hml: str

    @classmethod
    def for_card(cls, card_number: str, settings: Settings) -> "CardBranches":
        prd, hml = settings.card_branch_names(card_number)
        return cls(card_number=card_number, prd=prd, hml=hml)


def parse_card_number(branch_name: str, prefix: str) -> str:
    """Extract the card number from a branch name.

    The card number is whatever follows the prefix up to the next "-", so
    ``ZUP-123-prd`` gives ``123``. Non-numeric card numbers are accepted.

    Raises:
        BranchNameError: If the branch does not start with the prefix or has
            no card number
    """
    if not branch_name.startswith(prefix):
        raise BranchNameError(f"Branch '{branch_name}' doesn't start with prefix '{prefix}'")

    card_number = branch_name[len(prefix):].split("-", 1)[0]
    if not card_number:
        raise BranchNameError(f"Empty card number in branch name '{branch_name}'")
    return card_number
