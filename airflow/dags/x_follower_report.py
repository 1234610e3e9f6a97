from airflow import DAG
from datetime import datetime
from datetime import timedelta
from airflow.operators.bash import BashOperator
from airflow.operators.python import PythonOperator
from x_follower_report import notify

def start():
    print("start")

default_args = {
    'owner':'Airflow',
    'depends_on_past':False,
    # 실패/성공 시 슬랙으로 알람 보내기
    'on_failure_callback':notify.airflow_failed_callback,
    'on_success_callback':notify.airflow_success_message,
    'retries':1,
    'retry_delay':timedelta(minutes=5)
}

with DAG(
    dag_id = "x_follower_report",
    default_args = default_args,
    start_date = datetime(2026, 10, 19),
    schedule = "*/15 * * * *",
    catchup = False,
    max_active_runs = 1,
    tags=["x_follower"],
) as dag:

    start_dag = PythonOperator(
        task_id = 'start_alarm',
        python_callable = start,
        on_success_callback = None
    )

    task_1 = BashOperator(
        task_id = 'write_x_followers',
        bash_command = 'python3 -m x_follower_report.daily_x_followers'
    )

    start_dag >> task_1
