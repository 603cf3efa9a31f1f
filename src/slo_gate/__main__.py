from slo_gate.cli import main

if __name__ == "__main__":
    main()
