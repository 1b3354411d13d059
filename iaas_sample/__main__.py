from iaas_sample.cli.main import main

if __name__ == "__main__":
    main()
