from .arbitrage_bot import run

run()
