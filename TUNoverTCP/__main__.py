from TUNoverTCP.launcher_main import start_main


if __name__ == '__main__':
    start_main()
