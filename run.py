"""
Application Entry Point
"""
from monitoring_demo.main import main

if __name__ == "__main__":
    main()
