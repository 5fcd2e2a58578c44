"""Entry point for the cache simulator.

Usage:
    python run.py -s 4 -E 1 -b 4 -t traces/yi.trace
    python run.py -h
"""
from cachesim.simulation import main


if __name__ == '__main__':
    main()
