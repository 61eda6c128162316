class Coin:
    def __init__(self, value: int):
        self.value = value

    def __repr__(self):
        return f"Coin(value={self.value})"
