from rtc_gateway.cli import main

main()
