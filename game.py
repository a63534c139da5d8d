from cosmos2048.game import Direction, Game


if __name__ == "__main__":
    game = Game()

    key_mapping = {
        "w": Direction.UP,
        "d": Direction.RIGHT,
        "s": Direction.DOWN,
        "a": Direction.LEFT,
    }

    game.display()

    while True:
        key = input()
        if key in key_mapping:
            result = game.move(key_mapping[key])
            game.display()
            print(f"score: {game.score} (+{result.gained})")
            if game.won:
                print("You reached 2048!")
            if game.over:
                print("Game over! No more moves available.")
                break
        else:
            break
