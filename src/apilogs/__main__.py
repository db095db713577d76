from apilogs.main import main

main()
