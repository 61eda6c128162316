from typing import Optional


class Pop:
    def __init__(self, name: Optional[str]):
        self.name = name

    def __repr__(self):
        return f"Pop(name='{self.name}')"


class SelectionButton:
    def __init__(self, name: Optional[str] = None, price: Optional[int] = None):
        # Both stay unset until the first configure
        self.name = name
        self.price = price

    @property
    def is_configured(self) -> bool:
        return self.price is not None

    def __repr__(self):
        return f"SelectionButton(name='{self.name}', price={self.price})"
