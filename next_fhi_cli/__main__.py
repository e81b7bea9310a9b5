from next_fhi_cli.cli import main

if __name__ == "__main__":
    main()
